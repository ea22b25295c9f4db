"""Error taxonomy. Every run ends with at most one of these."""


class QuotaWatchError(Exception):
    """Base class; the AWS/botocore exception is kept as __cause__."""


class ConfigError(QuotaWatchError):
    pass


class SessionSetupFailed(QuotaWatchError):
    pass


class AccessQueryFailed(QuotaWatchError):
    pass


class MeteringUnavailable(QuotaWatchError):
    pass


class AccessMutationFailed(QuotaWatchError):
    pass


class NotificationFailed(QuotaWatchError):
    pass
