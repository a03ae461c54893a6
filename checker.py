#!/usr/bin/env python3
"""Assume an IAM role, then check the session against STS and S3.

    assume-check --arn arn:aws:iam::111111111111:role/Example \\
        --session-name sess1 --region us-east-1 --bucket my-bucket
"""
import logging
from typing import Annotated, Optional

import typer

from assume_role import resolve_session
from outcomes import CLASSIFIABLE_ERRORS, classify_error, report
from s3_check import list_bucket
from sts_check import verify_identity

__version__ = "0.1.0"

logger = logging.getLogger(__name__)

app = typer.Typer(help="Assume an IAM role and verify it with one STS and one S3 call.", add_completion=False)


# ---------------- helpers ----------------
def setup_logging(verbose=False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        force=True,
    )


def _version_callback(value: bool):
    if value:
        typer.echo(__version__)
        raise typer.Exit()


def _stage(session, service, operation, check, *args):
    try:
        client = session.client(service)
    except CLASSIFIABLE_ERRORS as e:
        return classify_error(e, service, operation)
    return check(client, *args)


def run_checks(session, role_arn, bucket):
    """Run both checks against one session, reporting each. Neither stage depends on the other."""
    identity = _stage(session, "sts", "GetCallerIdentity", verify_identity)
    report(identity)
    listing = _stage(session, "s3", "ListObjectsV2", list_bucket, bucket, role_arn)
    report(listing)
    return [identity, listing]


# ---------------- CLI ----------------
@app.command()
def main(
    arn: Annotated[str, typer.Option("--arn", "-a", help="ARN of the role to assume")],
    session_name: Annotated[str, typer.Option("--session-name", "-s", help="Name of the assumed role session")],
    bucket: Annotated[str, typer.Option("--bucket", "-b", help="Bucket to list as the assumed role")],
    region: Annotated[
        Optional[str],
        typer.Option("--region", envvar=["AWS_REGION", "AWS_DEFAULT_REGION"], help="Region for the STS exchange and clients"),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit"),
    ] = None,
):
    setup_logging(verbose)
    if not region:
        raise typer.BadParameter("no region given and none set in AWS_REGION or AWS_DEFAULT_REGION", param_hint="--region")

    logger.debug("Resolving session %s for %s in %s", session_name, arn, region)
    session = resolve_session(arn, session_name, region)
    outcomes = run_checks(session, arn, bucket)
    if not all(o.ok for o in outcomes):
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
