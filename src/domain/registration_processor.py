"""
Registration processing pipeline - core business logic.

This module handles one registration request end to end:
1. Admit the request (method, body, required fields, honeypot)
2. Compose the notification
3. Dispatch it to the mail transport
4. Map the outcome to a RegistrationResult

All errors are caught and returned as a RegistrationResult.
No exceptions propagate out of the public methods.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .composer import compose
from .models import (
    DispatchOutcome,
    ErrorKind,
    GateRejection,
    GateResult,
    NotificationMessage,
    RegistrationResult,
)
from . import request_gate
from integrations import mailchannels

logger = logging.getLogger(__name__)

SUCCESS_BODY = {'success': True, 'message': 'Registration received'}

_REJECTION_RESULTS = {
    GateRejection.METHOD_NOT_ALLOWED: RegistrationResult(405, 'Method Not Allowed', error_kind=ErrorKind.CLIENT_ERROR),
    GateRejection.MALFORMED_BODY: RegistrationResult(400, 'Invalid request body', error_kind=ErrorKind.CLIENT_ERROR),
    GateRejection.MISSING_FIELDS: RegistrationResult(400, 'Missing required fields', error_kind=ErrorKind.CLIENT_ERROR),
}

SILENT_DROP_RESULT = RegistrationResult(200, 'Success', error_kind=ErrorKind.ABUSE_SIGNAL)
TRANSPORT_ERROR_RESULT = RegistrationResult(500, 'Failed to send notification', error_kind=ErrorKind.TRANSPORT_ERROR)
INTERNAL_ERROR_RESULT = RegistrationResult(500, 'Internal Server Error', error_kind=ErrorKind.INTERNAL_ERROR)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RegistrationProcessor:
    """
    Runs the gate, composer and dispatcher for a single request.

    The clock and dispatcher are injectable so tests can pin the timestamp and
    observe outbound calls.
    """

    def __init__(
        self,
        dispatcher: Optional[Callable[[NotificationMessage], DispatchOutcome]] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._dispatcher = dispatcher
        self._clock = clock

    def process(self, event: Dict[str, Any]) -> RegistrationResult:
        """
        Process one registration request.

        Args:
            event: Lambda proxy event

        Returns:
            RegistrationResult (never raises)
        """
        try:
            gate_result = request_gate.admit(event)
            if not gate_result.admitted:
                return self._gate_result_to_response(gate_result)

            payload = gate_result.payload
            logger.info(f"Admitted registration from domain {payload.email_domain}")

            message = compose(payload, self._clock())
            outcome = self._dispatch(message)

            if outcome.delivered:
                logger.info("Registration notification sent")
                return RegistrationResult(200, json.dumps(SUCCESS_BODY), 'application/json')

            logger.error(f"Registration notification not sent: status={outcome.status.value}")
            return TRANSPORT_ERROR_RESULT

        except Exception as e:
            logger.error(f"Error processing registration: {e}", exc_info=True)
            return INTERNAL_ERROR_RESULT

    def _dispatch(self, message: NotificationMessage) -> DispatchOutcome:
        # Resolved at call time so patching mailchannels.dispatch takes effect
        dispatcher = self._dispatcher or mailchannels.dispatch
        return dispatcher(message)

    def _gate_result_to_response(self, gate_result: GateResult) -> RegistrationResult:
        if gate_result.silent_drop:
            return SILENT_DROP_RESULT
        return _REJECTION_RESULTS[gate_result.rejection]
