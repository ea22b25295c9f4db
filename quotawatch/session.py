import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from quotawatch.errors import SessionSetupFailed

# one attempt per call; a failure ends the pass
NO_RETRY = Config(retries={"max_attempts": 1, "mode": "standard"})


class AwsSession:
    """One boto3 session per run; clients are built on first use."""

    def __init__(self, region, session=None):
        self.region = region
        self._session = session
        self._clients = {}

    def _boto(self):
        if self._session is None:
            try:
                self._session = boto3.session.Session(region_name=self.region)
            except BotoCoreError as e:
                raise SessionSetupFailed(f"cannot open session in {self.region}: {e}") from e
        return self._session

    def client(self, name):
        if name not in self._clients:
            try:
                self._clients[name] = self._boto().client(name, region_name=self.region, config=NO_RETRY)
            except BotoCoreError as e:
                raise SessionSetupFailed(f"cannot create {name} client in {self.region}: {e}") from e
        return self._clients[name]

    def lazy(self, name):
        return LazyClient(self, name)


class LazyClient:
    """Stands in for a boto3 client until the first API call is made on it."""

    def __init__(self, session: AwsSession, name):
        self._session = session
        self._name = name

    def __getattr__(self, attr):
        return getattr(self._session.client(self._name), attr)
