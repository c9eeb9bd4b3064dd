"""
Tests for the request gate (method, body, required fields, honeypot).
"""

import base64
import json
import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain import request_gate
from domain.models import GateRejection


class TestMethodCheck:
    """Test that only POST is admitted."""

    @pytest.mark.parametrize('method', ['GET', 'PUT', 'DELETE', 'PATCH', 'OPTIONS', 'HEAD'])
    def test_non_post_rejected(self, make_event, valid_submission, method):
        """Test non-POST methods are refused regardless of body."""
        result = request_gate.admit(make_event(valid_submission, method=method))

        assert result.rejection is GateRejection.METHOD_NOT_ALLOWED

    def test_missing_method_rejected(self, valid_submission):
        """Test event without any method is refused."""
        result = request_gate.admit({'body': json.dumps(valid_submission)})

        assert result.rejection is GateRejection.METHOD_NOT_ALLOWED

    def test_lowercase_post_admitted(self, make_event, valid_submission):
        result = request_gate.admit(make_event(valid_submission, method='post'))

        assert result.admitted is True

    def test_http_api_v2_event(self, valid_submission):
        """Test method extraction from HTTP API / Function URL events."""
        event = {
            'version': '2.0',
            'requestContext': {'http': {'method': 'POST'}},
            'body': json.dumps(valid_submission),
            'isBase64Encoded': False
        }

        assert request_gate.admit(event).admitted is True

    def test_method_checked_before_body(self, make_event):
        """Test a bad body on a GET still yields method-not-allowed."""
        result = request_gate.admit(make_event('{not json', method='GET'))

        assert result.rejection is GateRejection.METHOD_NOT_ALLOWED


class TestBodyParsing:
    """Test malformed body handling."""

    @pytest.mark.parametrize('body', ['{not json', '', None, '[1, 2]', '"text"', 'null', '42'])
    def test_malformed_body(self, make_event, body):
        result = request_gate.admit(make_event(body))

        assert result.rejection is GateRejection.MALFORMED_BODY

    def test_non_text_body(self, make_event, valid_submission):
        """Test a direct invocation with an already-decoded body is refused."""
        event = make_event()
        event['body'] = valid_submission

        assert request_gate.admit(event).rejection is GateRejection.MALFORMED_BODY

    def test_base64_body(self, make_event, valid_submission):
        """Test base64-encoded bodies are decoded."""
        event = make_event()
        event['body'] = base64.b64encode(json.dumps(valid_submission).encode('utf-8')).decode('ascii')
        event['isBase64Encoded'] = True

        result = request_gate.admit(event)

        assert result.admitted is True
        assert result.payload.email == 'a@b.com'

    def test_corrupt_base64_body(self, make_event):
        event = make_event()
        event['body'] = '!!!not-base64!!!'
        event['isBase64Encoded'] = True

        assert request_gate.admit(event).rejection is GateRejection.MALFORMED_BODY


class TestRequiredFields:
    """Test required-field validation."""

    @pytest.mark.parametrize('field', ['email', 'first_name', 'last_name', 'organisation'])
    def test_missing_field(self, make_event, valid_submission, field):
        del valid_submission[field]

        result = request_gate.admit(make_event(valid_submission))

        assert result.rejection is GateRejection.MISSING_FIELDS

    @pytest.mark.parametrize('falsy', ['', None, 0, False, [], {}])
    def test_falsy_field(self, make_event, valid_submission, falsy):
        valid_submission['organisation'] = falsy

        result = request_gate.admit(make_event(valid_submission))

        assert result.rejection is GateRejection.MISSING_FIELDS

    def test_email_format_not_validated(self, make_event, valid_submission):
        """Test that only non-emptiness of email is checked."""
        valid_submission['email'] = 'not-an-email'

        result = request_gate.admit(make_event(valid_submission))

        assert result.admitted is True
        assert result.payload.email == 'not-an-email'

    def test_missing_fields_checked_before_honeypot(self, make_event):
        """Test that an incomplete bot submission is still a 400-class rejection."""
        result = request_gate.admit(make_event({'website': 'http://spam.example'}))

        assert result.rejection is GateRejection.MISSING_FIELDS


class TestPayloadResolution:
    """Test field resolution into SubmissionPayload."""

    def test_optional_fields_resolved(self, make_event, valid_submission):
        valid_submission.update({
            'title': 'Dr',
            'role': 'Researcher',
            'notes': '',
            'referral': None,
            'unknown_field': 'ignored'
        })

        payload = request_gate.admit(make_event(valid_submission)).payload

        assert payload.title == 'Dr'
        assert payload.role == 'Researcher'
        assert payload.notes is None
        assert payload.referral is None
        assert not hasattr(payload, 'unknown_field')

    def test_strings_kept_verbatim(self, make_event, valid_submission):
        valid_submission['first_name'] = '  Ada  '

        payload = request_gate.admit(make_event(valid_submission)).payload

        assert payload.first_name == '  Ada  '

    def test_non_string_values_rendered_as_json(self, make_event, valid_submission):
        valid_submission['country'] = 44
        valid_submission['notes'] = True

        payload = request_gate.admit(make_event(valid_submission)).payload

        assert payload.country == '44'
        assert payload.notes == 'true'


class TestHoneypot:
    """Test honeypot filtering."""

    def test_filled_website_is_silent_drop(self, make_event, valid_submission):
        valid_submission['website'] = 'http://spam.example'

        result = request_gate.admit(make_event(valid_submission))

        assert result.silent_drop is True
        assert result.rejection is None
        assert result.payload is None

    @pytest.mark.parametrize('website', ['', None])
    def test_empty_website_admitted(self, make_event, valid_submission, website):
        valid_submission['website'] = website

        assert request_gate.admit(make_event(valid_submission)).admitted is True


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
