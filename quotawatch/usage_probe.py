from botocore.exceptions import BotoCoreError, ClientError

from quotawatch.errors import MeteringUnavailable
from quotawatch.models import UsageReport, month_window, utcnow

PERIOD_S = 2678460  # 31 days and 1 minute


def metric_query(bucket_name):
    return {
        "Id": "i",
        "ReturnData": True,
        "MetricStat": {
            "Metric": {
                "Namespace": "AWS/S3",
                "MetricName": "BytesDownloaded",
                "Dimensions": [
                    {"Name": "BucketName", "Value": bucket_name},
                    {"Name": "FilterId", "Value": "EntireBucket"},
                ],
            },
            "Period": PERIOD_S,
            "Stat": "Sum",
        },
    }


class UsageProbe:
    """Reads BytesDownloaded for a bucket from CloudWatch. Every call is billed."""

    def __init__(self, cloudwatch):
        self.cloudwatch = cloudwatch

    def read(self, bucket_name, now=None) -> UsageReport:
        if not bucket_name:
            raise ValueError("bucket_name must be non-empty")
        start, end = month_window(now or utcnow())
        try:
            data = self.cloudwatch.get_metric_data(
                MetricDataQueries=[metric_query(bucket_name)],
                StartTime=start,
                EndTime=end,
                ScanBy="TimestampDescending",
            )
        except (ClientError, BotoCoreError) as e:
            raise MeteringUnavailable(f"GetMetricData failed for {bucket_name}: {e}") from e
        if "MetricDataResults" not in data:
            raise MeteringUnavailable(f"GetMetricData for {bucket_name} returned no result set")

        # metrics exist only once the site has been visited this month
        total = 0.0
        results = data["MetricDataResults"]
        values = results[0].get("Values") if results else None
        if values:
            total = float(values[0])
        # a wrong region also reads as no datapoints
        return UsageReport(bytes_transferred=total, period_start=start, period_end=end,
                           no_datapoints=not values)

    def bytes_served_this_month(self, bucket_name, now=None) -> float:
        return self.read(bucket_name, now).bytes_transferred
