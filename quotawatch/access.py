from botocore.exceptions import BotoCoreError, ClientError

from quotawatch.errors import AccessQueryFailed, AccessMutationFailed

# a bucket set up for static website hosting has all four false
FLAGS = ("BlockPublicAcls", "IgnorePublicAcls", "BlockPublicPolicy", "RestrictPublicBuckets")


def block_config(blocked: bool):
    return {k: blocked for k in FLAGS}


class AccessSwitch:
    """Reads and flips the S3 public access block of one bucket."""

    def __init__(self, s3):
        self.s3 = s3

    def site_is_online(self, bucket_name) -> bool:
        try:
            out = self.s3.get_public_access_block(Bucket=bucket_name)
        except (ClientError, BotoCoreError) as e:
            raise AccessQueryFailed(f"GetPublicAccessBlock failed for {bucket_name}: {e}") from e
        conf = out.get("PublicAccessBlockConfiguration")
        if conf is None:
            raise AccessQueryFailed(f"{bucket_name}: no PublicAccessBlockConfiguration in response")
        missing = [k for k in FLAGS if k not in conf]
        if missing:
            raise AccessQueryFailed(f"{bucket_name}: access block flags missing: {','.join(missing)}")
        return not any(conf[k] for k in FLAGS)

    def _put(self, bucket_name, blocked):
        try:
            self.s3.put_public_access_block(
                Bucket=bucket_name,
                PublicAccessBlockConfiguration=block_config(blocked),
            )
        except (ClientError, BotoCoreError) as e:
            what = "take offline" if blocked else "put online"
            raise AccessMutationFailed(f"failed to {what} {bucket_name}: {e}") from e

    def take_offline(self, bucket_name):
        self._put(bucket_name, True)

    def bring_online(self, bucket_name):
        self._put(bucket_name, False)
