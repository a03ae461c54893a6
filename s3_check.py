#!/usr/bin/env python3
import logging

from outcomes import CLASSIFIABLE_ERRORS, ServiceOutcome, classify_error

logger = logging.getLogger(__name__)

SERVICE = "s3"
OPERATION = "ListObjectsV2"


class MissingBucketError(ValueError):
    pass


def list_bucket(s3, bucket, role_arn):
    """List the first page of `bucket` and return the outcome. Failures are classified, never raised."""
    if not bucket:
        raise MissingBucketError("a bucket name is required to list objects")

    # single page only, no ContinuationToken
    try:
        resp = s3.list_objects_v2(Bucket=bucket)
    except CLASSIFIABLE_ERRORS as e:
        return classify_error(e, SERVICE, OPERATION)

    key_count = resp.get("KeyCount", len(resp.get("Contents", [])))
    truncated = resp.get("IsTruncated", False)
    logger.debug("Listed %d key(s) in %s (truncated=%s)", key_count, bucket, truncated)
    return ServiceOutcome.success(
        SERVICE,
        OPERATION,
        bucket=bucket,
        role_arn=role_arn,
        key_count=key_count,
        truncated=truncated,
    )
