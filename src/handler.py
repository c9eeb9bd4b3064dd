"""
AWS Lambda handler for registration / access-request submissions.

Thin orchestration layer that delegates to RegistrationProcessor.
Policy: one send attempt per request, no retries. Errors logged to CloudWatch.
"""

import logging
import os
from typing import Any, Dict

from domain.registration_processor import RegistrationProcessor
from integrations import mailchannels
from services import http

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Environment variables
ENVIRONMENT = os.environ.get('ENVIRONMENT', 'dev')

# Initialize processor once at module level (reused across invocations)
registration_processor = RegistrationProcessor()


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle a registration submission.

    Expected event: API Gateway / Function URL proxy event whose body is
    {
        "email": "...", "first_name": "...", "last_name": "...",
        "organisation": "...", "name"?, "title"?, "role"?, "country"?,
        "intended_use"?, "referral"?, "referral_other"?, "notes"?, "website"?
    }

    Args:
        event: Lambda proxy event
        context: Lambda context

    Returns:
        Proxy response dict with statusCode, headers and body
    """
    request_id = getattr(context, 'aws_request_id', None) or getattr(context, 'request_id', 'UNKNOWN')
    logger.info(f"Environment: {ENVIRONMENT}, request: {request_id}")

    try:
        result = registration_processor.process(event)
    except Exception as e:
        logger.error(f"Error processing registration: {e}", exc_info=True)
        return http.text_response(500, 'Internal Server Error')

    if result.success:
        logger.info(f"Request {request_id} finished: {result!r}")
    else:
        logger.warning(f"Request {request_id} refused: {result!r}")
    return http.build_response(result.status_code, result.body, result.content_type)


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    config = mailchannels.TRANSPORT_CONFIG
    return http.json_response(200, {
        'status': 'healthy',
        'environment': ENVIRONMENT,
        'apiKeyConfigured': bool(config.api_key),
        'dkimEnabled': bool(config.dkim_domain and config.dkim_selector)
    })
