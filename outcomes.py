#!/usr/bin/env python3
"""Outcome of a single remote call, error classification and reporting."""
import logging
from dataclasses import dataclass, field
from enum import Enum

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionError as BotoConnectionError,
    ConnectTimeoutError,
    HTTPClientError,
    IncompleteReadError,
    ReadTimeoutError,
    ResponseStreamingError,
)
from botocore.parsers import ResponseParserError

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    CONSTRUCTION = "construction"
    DISPATCH = "dispatch"
    RESPONSE = "response"
    SERVICE = "service"
    TIMEOUT = "timeout"

    @property
    def label(self):
        return _LABELS[self]


_LABELS = {
    FailureKind.CONSTRUCTION: "Construction failed",
    FailureKind.DISPATCH: "Dispatch failed",
    FailureKind.RESPONSE: "Response error",
    FailureKind.SERVICE: "Service error",
    FailureKind.TIMEOUT: "Timeout error",
}

# Order matters: timeouts subclass the connection errors, and the streaming
# errors subclass HTTPClientError.
_CLASSIFICATION = (
    ((ReadTimeoutError, ConnectTimeoutError), FailureKind.TIMEOUT),
    ((ResponseParserError, ResponseStreamingError, IncompleteReadError), FailureKind.RESPONSE),
    ((BotoConnectionError, HTTPClientError), FailureKind.DISPATCH),
    ((ClientError,), FailureKind.SERVICE),
    ((BotoCoreError,), FailureKind.CONSTRUCTION),
)

# Exceptions a remote call may raise that classify_error understands.
CLASSIFIABLE_ERRORS = (BotoCoreError, ClientError, ResponseParserError)


@dataclass(frozen=True)
class ServiceOutcome:
    """Result of one call against one service: a success payload or a classified failure."""

    service: str
    operation: str
    ok: bool
    payload: dict = field(default_factory=dict)
    kind: FailureKind = None
    cause: str = ""

    @classmethod
    def success(cls, service, operation, **payload):
        return cls(service=service, operation=operation, ok=True, payload=payload)

    @classmethod
    def failure(cls, service, operation, kind, cause):
        return cls(service=service, operation=operation, ok=False, kind=kind, cause=cause)


# ---------------- classification ----------------
def error_kind(exc):
    for types, kind in _CLASSIFICATION:
        if isinstance(exc, types):
            return kind
    raise TypeError(f"Cannot classify {type(exc).__name__}: {exc}")


def error_cause(exc):
    """Human readable cause. ClientErrors are reduced to '<Code>: <Message>'."""
    if isinstance(exc, ClientError):
        err = (exc.response or {}).get("Error", {})
        code = err.get("Code") or "Unknown"
        message = err.get("Message")
        return f"{code}: {message}" if message else code
    return str(exc)


def classify_error(exc, service, operation):
    """Map a botocore failure raised by `service` onto a failed ServiceOutcome."""
    kind = error_kind(exc)
    logger.debug("%s %s raised %s, classified as %s", service, operation, type(exc).__name__, kind.value)
    return ServiceOutcome.failure(service, operation, kind, error_cause(exc))


# ---------------- reporting ----------------
def _success_line(outcome):
    p = outcome.payload
    if outcome.service == "sts":
        return f"Assumed {p.get('user_id', '')} session {p.get('arn', '')}"
    if outcome.service == "s3":
        return f"Succeeded in listing the bucket {p.get('bucket', '')} as {p.get('role_arn', '')}"
    return f"{outcome.service} {outcome.operation} succeeded"


def format_outcome(outcome):
    if outcome.ok:
        return _success_line(outcome)
    return f"{outcome.kind.label}: {outcome.cause}"


def report(outcome):
    line = format_outcome(outcome)
    if outcome.ok:
        logger.info("%s %s succeeded", outcome.service, outcome.operation)
    else:
        logger.warning("%s %s failed (%s)", outcome.service, outcome.operation, outcome.kind.value)
    print(line)
    return line
