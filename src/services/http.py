"""
HTTP helpers for API Gateway / Lambda Function URL proxy events.

Handles both payload formats:
- REST API proxy integration (v1): event['httpMethod']
- HTTP API and Function URLs (v2): event['requestContext']['http']['method']
"""

import base64
import binascii
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Optional CORS origin added to every response
CORS_ALLOW_ORIGIN = os.environ.get('CORS_ALLOW_ORIGIN', '')


class BodyDecodeError(ValueError):
    """Raised when the request body cannot be decoded to text."""
    pass


def get_method(event: Dict[str, Any]) -> str:
    """
    Extract the HTTP method from a proxy event.

    Args:
        event: Lambda proxy event

    Returns:
        Upper-cased method, or empty string if the event carries none
    """
    method = event.get('httpMethod')
    if not method:
        http = (event.get('requestContext') or {}).get('http') or {}
        method = http.get('method')
    return str(method).upper() if method else ''


def read_body(event: Dict[str, Any]) -> Optional[str]:
    """
    Return the request body as text.

    Args:
        event: Lambda proxy event

    Returns:
        Body text, or None if the event has no body

    Raises:
        BodyDecodeError: If a base64 body is corrupt or not UTF-8
    """
    body = event.get('body')
    if body is None:
        return None

    if event.get('isBase64Encoded'):
        try:
            return base64.b64decode(body, validate=True).decode('utf-8')
        except (binascii.Error, TypeError, UnicodeDecodeError) as e:
            raise BodyDecodeError(f"Invalid base64 body: {e}")

    return body


def _headers(content_type: str) -> Dict[str, str]:
    headers = {'Content-Type': content_type}
    if CORS_ALLOW_ORIGIN:
        headers['Access-Control-Allow-Origin'] = CORS_ALLOW_ORIGIN
    return headers


def build_response(status_code: int, body: str, content_type: str = 'text/plain') -> Dict[str, Any]:
    """
    Build a proxy integration response dict.

    Args:
        status_code: HTTP status code
        body: Response body text
        content_type: Response MIME type

    Returns:
        Dict with statusCode, headers and body
    """
    return {
        'statusCode': status_code,
        'headers': _headers(content_type),
        'body': body,
    }


def text_response(status_code: int, text: str) -> Dict[str, Any]:
    return build_response(status_code, text, 'text/plain')


def json_response(status_code: int, payload: Dict[str, Any]) -> Dict[str, Any]:
    return build_response(status_code, json.dumps(payload), 'application/json')
