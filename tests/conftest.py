"""
Pytest configuration and fixtures for all tests.
"""

import json
import os
import sys
import pytest
from unittest.mock import Mock

# Add src and hooks to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../hooks'))

# Set up test environment variables before importing any modules
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('MAIL_API_URL', 'https://mail.example.test/tx/v1/send')
os.environ.setdefault('MAIL_TO_EMAIL', 'registrations@example.com')
os.environ.setdefault('MAIL_TO_NAME', 'Example Registrations')
os.environ.setdefault('MAIL_FROM_EMAIL', 'noreply@example.com')
os.environ.setdefault('MAIL_FROM_NAME', 'Example Registration Form')


@pytest.fixture
def lambda_context():
    """Mock Lambda context."""
    context = Mock()
    context.aws_request_id = "test-request-id"
    context.invoked_function_arn = "arn:aws:lambda:us-west-2:123456789012:function:registration-test"
    context.function_name = "registration-test"
    return context


@pytest.fixture
def valid_submission():
    """Minimal valid submission body."""
    return {
        'email': 'a@b.com',
        'first_name': 'A',
        'last_name': 'B',
        'organisation': 'Org'
    }


@pytest.fixture
def make_event():
    """Build a REST API (v1) proxy event."""
    def _make_event(body=None, method='POST'):
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        return {
            'httpMethod': method,
            'headers': {'Content-Type': 'application/json'},
            'body': body,
            'isBase64Encoded': False
        }
    return _make_event
