"""Shared fixtures: fixed clocks, a config pointed at tmp, recording fakes."""

from __future__ import annotations

import datetime as dt

import boto3
import pytest

from quotawatch.access import FLAGS
from quotawatch.config import QuotaConfig
from quotawatch.errors import AccessQueryFailed
from quotawatch.models import NotificationEvent, UsageReport, month_window

UTC = dt.timezone.utc
MID_MONTH = dt.datetime(2026, 10, 15, 12, 30, 45, tzinfo=UTC)
FIRST_OF_MONTH = dt.datetime(2026, 11, 1, 0, 4, 10, tzinfo=UTC)
BUCKET = "www.example.com"


@pytest.fixture
def cfg(tmp_path) -> QuotaConfig:
    return QuotaConfig(
        bucket_name=BUCKET,
        region="us-west-2",
        monthly_byte_quota=100.0e9,
        recipient="me@myemailprovider.com",
        sender="quotawatcher@example.com",
        audit_path=str(tmp_path / "audit" / "audit.jsonl"),
    )


def aws_client(name):
    return boto3.client(name, region_name="us-west-2",
                        aws_access_key_id="testing", aws_secret_access_key="testing")


class FakeS3:
    """In-memory public access block; get/put share the same four flags."""

    def __init__(self, blocked=None):
        self.conf = None if blocked is None else {k: blocked for k in FLAGS}
        self.puts = []

    def get_public_access_block(self, Bucket):
        if self.conf is None:
            return {}
        return {"PublicAccessBlockConfiguration": dict(self.conf)}

    def put_public_access_block(self, Bucket, PublicAccessBlockConfiguration):
        self.puts.append(dict(PublicAccessBlockConfiguration))
        self.conf = dict(PublicAccessBlockConfiguration)
        return {}


class Recorder:
    """Fake access/usage/notifier collaborators writing into one ordered call log."""

    def __init__(self, online=True, bytes_=0.0, fail=None):
        self.online = online
        self.bytes = bytes_
        self.fail = fail or {}
        self.calls = []

    def _maybe_fail(self, name):
        if name in self.fail:
            raise self.fail[name]

    # access
    def site_is_online(self, bucket):
        self.calls.append("site_is_online")
        self._maybe_fail("site_is_online")
        return self.online

    def take_offline(self, bucket):
        self.calls.append("take_offline")
        self._maybe_fail("take_offline")
        self.online = False

    def bring_online(self, bucket):
        self.calls.append("bring_online")
        self._maybe_fail("bring_online")
        self.online = True

    # usage
    def read(self, bucket, now):
        self.calls.append("read")
        self._maybe_fail("read")
        start, end = month_window(now)
        return UsageReport(self.bytes, start, end)

    # notifier
    def send(self, bucket, bytes_transferred, online):
        self.calls.append(("send", online))
        self._maybe_fail("send")
        return NotificationEvent(online, bytes_transferred, MID_MONTH)


@pytest.fixture
def query_failure():
    return AccessQueryFailed("GetPublicAccessBlock failed for www.example.com: NoSuchBucket")
