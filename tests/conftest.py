import logging

import boto3
import pytest
from botocore.stub import Stubber

ROLE_ARN = "arn:aws:iam::111111111111:role/Example"
ASSUMED_ARN = "arn:aws:sts::111111111111:assumed-role/Example/sess1"
USER_ID = "AROA...:sess1"
BUCKET = "my-bucket"


@pytest.fixture(autouse=True)
def isolated_aws_env(monkeypatch, tmp_path):
    """Keep the developer's own AWS config and credentials out of every test."""
    for name in (
        "AWS_ACCESS_KEY_ID",
        "AWS_SECRET_ACCESS_KEY",
        "AWS_SESSION_TOKEN",
        "AWS_SECURITY_TOKEN",
        "AWS_CREDENTIAL_EXPIRATION",
        "AWS_PROFILE",
        "AWS_REGION",
        "AWS_DEFAULT_REGION",
        "AWS_ENDPOINT_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("AWS_CONFIG_FILE", str(tmp_path / "config"))
    monkeypatch.setenv("AWS_SHARED_CREDENTIALS_FILE", str(tmp_path / "credentials"))


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def base_env(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDBASE")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "base-secret")


@pytest.fixture
def stub_session():
    return boto3.Session(
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
        region_name="us-east-1",
    )


@pytest.fixture
def sts_stub(stub_session):
    client = stub_session.client("sts")
    with Stubber(client) as stubber:
        yield client, stubber


@pytest.fixture
def s3_stub(stub_session):
    client = stub_session.client("s3")
    with Stubber(client) as stubber:
        yield client, stubber


class FakeSession:
    """Hands out pre-built clients in place of a resolved boto3 session."""

    def __init__(self, **clients):
        self.clients = clients
        self.requested = []

    def client(self, service):
        self.requested.append(service)
        client = self.clients[service]
        if isinstance(client, Exception):
            raise client
        return client
