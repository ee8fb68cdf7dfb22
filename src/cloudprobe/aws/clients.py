from typing import Any, Dict, Optional

import boto3

from ..config import ProbeConfig


class AwsClients:
    """boto3 clients built from one Session and cached per instance.

    Construct one per test session and hand it to whatever needs AWS access.
    """

    def __init__(self, session: boto3.Session, endpoint_url: Optional[str] = None):
        self.session = session
        self.endpoint_url = endpoint_url
        self._clients: Dict[str, Any] = {}

    @classmethod
    def from_config(cls, config: ProbeConfig, endpoint_url: Optional[str] = None) -> "AwsClients":
        session = boto3.Session(
            region_name=config.region,
            aws_access_key_id=config.aws_access_key_id,
            aws_secret_access_key=config.aws_secret_access_key,
        )
        return cls(session, endpoint_url=endpoint_url)

    @property
    def region(self) -> str:
        return self.session.region_name

    def client(self, service: str) -> Any:
        if service not in self._clients:
            kwargs = {"region_name": self.region}
            if self.endpoint_url:
                kwargs["endpoint_url"] = self.endpoint_url
            self._clients[service] = self.session.client(service, **kwargs)
        return self._clients[service]

    @property
    def ec2(self):
        return self.client("ec2")

    @property
    def s3(self):
        return self.client("s3")

    @property
    def sns(self):
        return self.client("sns")

    @property
    def sqs(self):
        return self.client("sqs")

    @property
    def iam(self):
        return self.client("iam")

    @property
    def rds(self):
        return self.client("rds")

    @property
    def dynamodb(self):
        return self.client("dynamodb")

    @property
    def lambda_(self):
        return self.client("lambda")

    @property
    def logs(self):
        return self.client("logs")

    @property
    def cloudwatch(self):
        return self.client("cloudwatch")

    @property
    def cloudtrail(self):
        return self.client("cloudtrail")

    @property
    def sts(self):
        return self.client("sts")
