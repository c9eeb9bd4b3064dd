"""
Request gate: method check, body parse, field validation and honeypot filter.

Never raises for bad input. Every problem is returned as a GateResult so the
processor can map it to a response without exceptions for control flow.
"""

import json
import logging
from typing import Any, Dict, Optional

from .models import (
    GateRejection,
    GateResult,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    SubmissionPayload,
)
from services import http

logger = logging.getLogger(__name__)

WRITE_METHOD = 'POST'


def _to_text(value: Any) -> Optional[str]:
    """
    Resolve a raw JSON value to an optional string.

    Falsy values (None, "", 0, false, [], {}) become None. Strings are kept
    verbatim; other values are rendered as JSON text.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _parse_body(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Read the body once and parse it as a JSON object, or return None."""
    try:
        raw = http.read_body(event)
    except http.BodyDecodeError as e:
        logger.warning(f"Request body could not be decoded: {e}")
        return None

    if not raw:
        logger.warning("Request body is empty")
        return None

    if not isinstance(raw, str):
        logger.warning(f"Request body is {type(raw).__name__}, expected JSON text")
        return None

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Request body is not valid JSON: {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"Request body is JSON {type(data).__name__}, expected object")
        return None

    return data


def admit(event: Dict[str, Any]) -> GateResult:
    """
    Decide whether a request may proceed to composition and dispatch.

    Args:
        event: Lambda proxy event

    Returns:
        GateResult with either an admitted payload, a rejection, or a silent drop
    """
    method = http.get_method(event)
    if method != WRITE_METHOD:
        logger.info(f"Rejecting method {method or '<none>'}")
        return GateResult.reject(GateRejection.METHOD_NOT_ALLOWED)

    data = _parse_body(event)
    if data is None:
        return GateResult.reject(GateRejection.MALFORMED_BODY)

    values = {field: _to_text(data.get(field)) for field in REQUIRED_FIELDS + OPTIONAL_FIELDS}

    missing = [field for field in REQUIRED_FIELDS if values[field] is None]
    if missing:
        # Field names stay in the logs; the caller only gets a generic message
        logger.info(f"Missing required fields: {missing}")
        return GateResult.reject(GateRejection.MISSING_FIELDS)

    payload = SubmissionPayload(**values)

    if payload.is_automated:
        logger.warning(
            f"Honeypot triggered for submission from domain {payload.email_domain}, "
            f"dropping silently"
        )
        return GateResult.drop()

    return GateResult.admit(payload)
