"""
Data models for the registration domain.

These type-safe data structures define clear contracts between the request
gate, the message composer and the transport dispatcher.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


REQUIRED_FIELDS = ('email', 'first_name', 'last_name', 'organisation')

OPTIONAL_FIELDS = (
    'name',
    'title',
    'role',
    'country',
    'intended_use',
    'referral',
    'referral_other',
    'notes',
    'website',
)

NOT_SPECIFIED = 'Not specified'
NO_NOTES = 'None'


@dataclass(frozen=True)
class SubmissionPayload:
    """
    Validated registration submission.

    Required fields are always non-empty strings. Optional fields are None when
    the submitter left them out; the composer substitutes the placeholders below.

    Attributes:
        email: Submitter email address (not format-checked)
        first_name: Submitter first name
        last_name: Submitter last name
        organisation: Submitter organisation
        name: Display name override
        title: Honorific such as "Dr" (used only when name is absent)
        role: Role in the organisation (default "Not specified")
        country: Country (default "Not specified")
        intended_use: Intended use (default "Not specified")
        referral: How the submitter heard about us (default "Not specified")
        referral_other: Free-text referral detail, appended when present
        notes: Additional notes (default "None")
        website: Honeypot field, must be empty for humans
    """
    email: str
    first_name: str
    last_name: str
    organisation: str
    name: Optional[str] = None
    title: Optional[str] = None
    role: Optional[str] = None
    country: Optional[str] = None
    intended_use: Optional[str] = None
    referral: Optional[str] = None
    referral_other: Optional[str] = None
    notes: Optional[str] = None
    website: Optional[str] = None

    @property
    def is_automated(self) -> bool:
        """Check if the honeypot field was filled in."""
        return bool(self.website)

    @property
    def email_domain(self) -> str:
        """Domain part of the email, safe to log."""
        return self.email.rpartition('@')[2] or 'unknown'


@dataclass(frozen=True)
class NotificationMessage:
    """
    Plain-text notification built from a submission.

    Attributes:
        subject: Email subject line
        body_text: Plain-text body
        reply_to_email: Submitter email (operators reply directly)
        reply_to_name: Submitter display name for the reply-to header
    """
    subject: str
    body_text: str
    reply_to_email: str
    reply_to_name: str


class GateRejection(Enum):
    """Reasons the request gate refuses a request."""
    METHOD_NOT_ALLOWED = 'method_not_allowed'
    MALFORMED_BODY = 'malformed_body'
    MISSING_FIELDS = 'missing_fields'


@dataclass(frozen=True)
class GateResult:
    """
    Result of the request gate.

    Exactly one of payload, rejection or silent_drop is set. A silent drop
    (honeypot) is not a rejection: the caller sees success but nothing is sent.
    """
    payload: Optional[SubmissionPayload] = None
    rejection: Optional[GateRejection] = None
    silent_drop: bool = False

    @property
    def admitted(self) -> bool:
        return self.payload is not None

    @classmethod
    def admit(cls, payload: SubmissionPayload) -> 'GateResult':
        return cls(payload=payload)

    @classmethod
    def reject(cls, rejection: GateRejection) -> 'GateResult':
        return cls(rejection=rejection)

    @classmethod
    def drop(cls) -> 'GateResult':
        return cls(silent_drop=True)


class DispatchStatus(Enum):
    DELIVERED = 'delivered'
    REJECTED = 'rejected'
    TRANSPORT_FAILURE = 'transport_failure'


@dataclass(frozen=True)
class DispatchOutcome:
    """
    Result of handing a message to the mail transport.

    Delivered means accepted for delivery, nothing more. Rejected (4xx) and
    TransportFailure (other statuses, network errors) carry a detail string
    intended for logs only.
    """
    status: DispatchStatus
    detail: Optional[str] = None

    @property
    def delivered(self) -> bool:
        return self.status is DispatchStatus.DELIVERED

    @classmethod
    def delivered_ok(cls) -> 'DispatchOutcome':
        return cls(DispatchStatus.DELIVERED)

    @classmethod
    def rejected(cls, reason: str) -> 'DispatchOutcome':
        return cls(DispatchStatus.REJECTED, reason)

    @classmethod
    def transport_failure(cls, detail: str) -> 'DispatchOutcome':
        return cls(DispatchStatus.TRANSPORT_FAILURE, detail)


class ErrorKind(Enum):
    """Caller-facing error taxonomy."""
    CLIENT_ERROR = 'client_error'
    ABUSE_SIGNAL = 'abuse_signal'
    TRANSPORT_ERROR = 'transport_error'
    INTERNAL_ERROR = 'internal_error'


@dataclass(frozen=True)
class RegistrationResult:
    """
    Caller-visible outcome of one registration request.

    Attributes:
        status_code: HTTP status code
        body: Response body text (plain text or serialized JSON)
        content_type: MIME type of body
        error_kind: Error classification (None for a real delivery)
    """
    status_code: int
    body: str
    content_type: str = 'text/plain'
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.status_code == 200

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        kind = self.error_kind.value if self.error_kind else 'none'
        return f"RegistrationResult(status={self.status_code}, error_kind={kind})"
