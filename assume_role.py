#!/usr/bin/env python3
"""Session credentials for an assumed role.

Base credentials come from the process environment (AWS_ACCESS_KEY_ID,
AWS_SECRET_ACCESS_KEY, AWS_SESSION_TOKEN) and are exchanged through
sts:AssumeRole for temporary credentials of the target role. Nothing is read
or sent until the first signed request needs the credentials.
"""
import logging

import boto3
import botocore.session
from botocore.credentials import (
    AssumeRoleCredentialFetcher,
    CredentialProvider,
    CredentialResolver,
    DeferredRefreshableCredentials,
    EnvProvider,
)
from botocore.exceptions import ClientError, CredentialRetrievalError, NoCredentialsError

from outcomes import error_cause

logger = logging.getLogger(__name__)


class MissingRegionError(ValueError):
    pass


class EnvAssumeRoleProvider(CredentialProvider):
    """Environment credentials wrapped by an assume-role exchange."""

    METHOD = "assume-role"
    CANONICAL_NAME = "env-assume-role"

    def __init__(self, client_creator, role_arn, session_name, environ=None):
        super().__init__()
        self._client_creator = client_creator
        self.role_arn = role_arn
        self.session_name = session_name
        self._environ = environ

    def base_credentials(self):
        creds = EnvProvider(environ=self._environ).load()
        if creds is None:
            raise NoCredentialsError()
        return creds

    def resolve(self):
        """Run the exchange and return refresh metadata for the assumed role."""
        logger.debug("Assuming %s as session %s", self.role_arn, self.session_name)
        fetcher = AssumeRoleCredentialFetcher(
            client_creator=self._client_creator,
            source_credentials=self.base_credentials(),
            role_arn=self.role_arn,
            extra_args={"RoleSessionName": self.session_name},
        )
        try:
            return fetcher.fetch_credentials()
        except ClientError as e:
            raise CredentialRetrievalError(provider=self.METHOD, error_msg=error_cause(e)) from e

    def load(self):
        return DeferredRefreshableCredentials(refresh_using=self.resolve, method=self.METHOD)


def resolve_session(role_arn, session_name, region, environ=None):
    """Build a boto3 session whose credentials are those of `role_arn`.

    The session's credentials object is created once here and shared by every
    client made from the session.
    """
    if not region:
        raise MissingRegionError("a region is required to assume a role")

    core = botocore.session.Session()
    provider = EnvAssumeRoleProvider(core.create_client, role_arn, session_name, environ=environ)
    core.register_component("credential_provider", CredentialResolver(providers=[provider]))
    return boto3.Session(botocore_session=core, region_name=region)
