"""quota-watch: take a static S3 website offline for the rest of the month
once its monthly download quota is spent, and put it back when the month
rolls over."""

__version__ = "0.3.0"
