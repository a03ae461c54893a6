#!/usr/bin/env python3
import logging

from outcomes import CLASSIFIABLE_ERRORS, ServiceOutcome, classify_error

logger = logging.getLogger(__name__)

SERVICE = "sts"
OPERATION = "GetCallerIdentity"


def verify_identity(sts):
    """Call sts:GetCallerIdentity and return the outcome. Failures are classified, never raised."""
    try:
        resp = sts.get_caller_identity()
    except CLASSIFIABLE_ERRORS as e:
        return classify_error(e, SERVICE, OPERATION)

    logger.debug("Caller identity: %s", {k: v for k, v in resp.items() if k != "ResponseMetadata"})
    return ServiceOutcome.success(
        SERVICE,
        OPERATION,
        user_id=resp.get("UserId") or "",
        arn=resp.get("Arn") or "",
        account=resp.get("Account") or "",
    )
