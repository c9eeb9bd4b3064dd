"""
Message composer: builds the operator notification from a submission.

Pure functions only. The timestamp is passed in so output is reproducible.
"""

from datetime import datetime, timezone

from .models import NO_NOTES, NOT_SPECIFIED, NotificationMessage, SubmissionPayload

SUBJECT_PREFIX = 'New Access Request: '


def resolve_display_name(payload: SubmissionPayload) -> str:
    """
    Resolve the name shown in the subject and body.

    Priority: name > "title first last" > "first last"
    """
    if payload.name:
        return payload.name
    if payload.title:
        return f"{payload.title} {payload.first_name} {payload.last_name}".strip()
    return f"{payload.first_name} {payload.last_name}"


def resolve_reply_to_name(payload: SubmissionPayload) -> str:
    """Name for the reply-to header (title is not included)."""
    return payload.name or f"{payload.first_name} {payload.last_name}"


def format_timestamp(now: datetime) -> str:
    """
    Format a timestamp as UTC ISO-8601 with milliseconds, e.g. 2025-01-31T09:15:00.123Z.

    Naive datetimes are taken to be UTC already.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"


def compose(payload: SubmissionPayload, now: datetime) -> NotificationMessage:
    """
    Build the subject and plain-text body for a validated submission.

    Args:
        payload: Validated submission
        now: Time the submission was received

    Returns:
        NotificationMessage ready for dispatch
    """
    display_name = resolve_display_name(payload)

    referral = payload.referral or NOT_SPECIFIED
    if payload.referral_other:
        referral += f" - {payload.referral_other}"

    body = f"""
New access request received:

Name: {display_name}
Email: {payload.email}
Organisation: {payload.organisation}
Role: {payload.role or NOT_SPECIFIED}
Country: {payload.country or NOT_SPECIFIED}
Intended Use: {payload.intended_use or NOT_SPECIFIED}
Referral: {referral}

Additional Notes: {payload.notes or NO_NOTES}

---
Received: {format_timestamp(now)}
"""

    return NotificationMessage(
        subject=SUBJECT_PREFIX + display_name,
        body_text=body.strip(),
        reply_to_email=payload.email,
        reply_to_name=resolve_reply_to_name(payload),
    )
