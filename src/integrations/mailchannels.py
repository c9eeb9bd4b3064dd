"""
MailChannels Transactional Email Integration

This module relays composed notifications to the MailChannels `tx/v1/send`
HTTP API and maps the reply to a DispatchOutcome.

Usage:
    from integrations import mailchannels

    outcome = mailchannels.dispatch(message)
    if outcome.delivered:
        ...

Policy: one attempt per request. No retries, no backoff, no queueing. A failed
send is final; the caller must resubmit.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from domain.models import DispatchOutcome, NotificationMessage

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://api.mailchannels.net/tx/v1/send'

# Response text kept in logs is capped to avoid flooding CloudWatch
MAX_DETAIL_LENGTH = 1000


# ============================================================================
# Custom Exception Classes
# ============================================================================

class ConfigurationError(Exception):
    """Raised when transport configuration is invalid or missing."""
    pass


# ============================================================================
# Module-Level Configuration and Initialization
# ============================================================================

@dataclass(frozen=True)
class TransportConfig:
    """
    Fixed identities and connection settings for the mail transport.

    Attributes:
        api_url: Send endpoint
        api_key: Optional API key sent as X-Api-Key
        to_email: Recipient address (registrations inbox)
        to_name: Recipient display name
        from_email: Sender address
        from_name: Sender display name
        dkim_domain: DKIM signing domain hint (None to omit)
        dkim_selector: DKIM selector hint (None to omit)
        connect_timeout: Seconds to establish the connection
        read_timeout: Seconds to wait for the response
    """
    api_url: str = DEFAULT_API_URL
    api_key: Optional[str] = None
    to_email: str = 'registrations@medaskca.com'
    to_name: str = 'MEDASKCA Registrations'
    from_email: str = 'noreply@medaskca.com'
    from_name: str = 'MEDASKCA Registration Form'
    dkim_domain: Optional[str] = 'medaskca.com'
    dkim_selector: Optional[str] = 'mailchannels'
    connect_timeout: float = 5.0
    read_timeout: float = 10.0


def _read_timeout(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got: '{raw}'")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")
    return value


def _read_address(name: str, default: str) -> str:
    value = os.environ.get(name, default)
    if not value or '@' not in value:
        raise ConfigurationError(
            f"{name} must be an email address. "
            f"Please configure this in your SAM template or Lambda environment."
        )
    return value


def load_transport_config() -> TransportConfig:
    """
    Read and validate transport settings from environment variables.

    Unset variables fall back to the TransportConfig defaults. DKIM_DOMAIN or
    DKIM_SELECTOR set to an empty string disables the DKIM hints.

    Returns:
        TransportConfig: The validated configuration

    Raises:
        ConfigurationError: If a setting is present but invalid
    """
    defaults = TransportConfig()

    api_url = os.environ.get('MAIL_API_URL') or defaults.api_url
    if not api_url.startswith(('https://', 'http://')):
        raise ConfigurationError(
            f"MAIL_API_URL has invalid format. Expected an http(s) URL, got: '{api_url[:50]}'"
        )

    config = TransportConfig(
        api_url=api_url,
        api_key=os.environ.get('MAIL_API_KEY') or None,
        to_email=_read_address('MAIL_TO_EMAIL', defaults.to_email),
        to_name=os.environ.get('MAIL_TO_NAME', defaults.to_name),
        from_email=_read_address('MAIL_FROM_EMAIL', defaults.from_email),
        from_name=os.environ.get('MAIL_FROM_NAME', defaults.from_name),
        dkim_domain=os.environ.get('DKIM_DOMAIN', defaults.dkim_domain) or None,
        dkim_selector=os.environ.get('DKIM_SELECTOR', defaults.dkim_selector) or None,
        connect_timeout=_read_timeout('MAIL_CONNECT_TIMEOUT', defaults.connect_timeout),
        read_timeout=_read_timeout('MAIL_READ_TIMEOUT', defaults.read_timeout),
    )

    logger.info(
        f"Mail transport configured: url={config.api_url}, "
        f"api_key={'set' if config.api_key else 'unset'}, "
        f"dkim={'on' if config.dkim_domain and config.dkim_selector else 'off'}, "
        f"connect_timeout={config.connect_timeout}s, read_timeout={config.read_timeout}s"
    )
    return config


# Initialize at module import time (reused across warm invocations)
try:
    TRANSPORT_CONFIG = load_transport_config()
except ConfigurationError as e:
    logger.error(f"Module initialization failed: {e}")
    raise

# Session with the default adapter: max_retries=0, one attempt per call
http_session = requests.Session()


# ============================================================================
# Dispatch
# ============================================================================

def build_send_payload(message: NotificationMessage, config: TransportConfig) -> Dict[str, Any]:
    """
    Build the MailChannels send request body.

    Args:
        message: Composed notification
        config: Transport configuration

    Returns:
        Dict ready to be serialized as JSON
    """
    personalization: Dict[str, Any] = {
        'to': [{'email': config.to_email, 'name': config.to_name}],
    }
    if config.dkim_domain and config.dkim_selector:
        personalization['dkim_domain'] = config.dkim_domain
        personalization['dkim_selector'] = config.dkim_selector

    return {
        'personalizations': [personalization],
        'from': {'email': config.from_email, 'name': config.from_name},
        'reply_to': {'email': message.reply_to_email, 'name': message.reply_to_name},
        'subject': message.subject,
        'content': [
            {
                'type': 'text/plain',
                'value': message.body_text,
            }
        ],
    }


def _truncate(text: str) -> str:
    if len(text) > MAX_DETAIL_LENGTH:
        return text[:MAX_DETAIL_LENGTH] + '...'
    return text


def dispatch(message: NotificationMessage, config: Optional[TransportConfig] = None) -> DispatchOutcome:
    """
    Send a notification through the mail transport.

    Args:
        message: Composed notification
        config: Transport configuration (defaults to the one loaded at import)

    Returns:
        DispatchOutcome: delivered (2xx), rejected (4xx) or transport failure
        (other statuses, connection errors, timeouts). Failure detail is for
        logs only and must not be returned to the caller.
    """
    config = config or TRANSPORT_CONFIG
    start_time = time.time()

    headers = {'Content-Type': 'application/json'}
    if config.api_key:
        headers['X-Api-Key'] = config.api_key

    logger.info(
        f"Sending notification: subject_length={len(message.subject)}, "
        f"body_length={len(message.body_text)}"
    )

    try:
        response = http_session.post(
            config.api_url,
            json=build_send_payload(message, config),
            headers=headers,
            timeout=(config.connect_timeout, config.read_timeout),
        )
    except requests.RequestException as e:
        detail = f"{type(e).__name__}: {e}"
        logger.error(f"Failed to send email: {detail}")
        return DispatchOutcome.transport_failure(detail)

    elapsed = time.time() - start_time

    if 200 <= response.status_code < 300:
        logger.info(f"Mail transport accepted message: status={response.status_code}, time={elapsed:.2f}s")
        return DispatchOutcome.delivered_ok()

    detail = f"HTTP {response.status_code}: {_truncate(response.text)}"
    logger.error(f"Failed to send email: {detail}")

    if 400 <= response.status_code < 500:
        return DispatchOutcome.rejected(detail)
    return DispatchOutcome.transport_failure(detail)
