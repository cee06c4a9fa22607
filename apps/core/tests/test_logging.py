"""
Tests for structured logging, PII masking and security event logging.
"""
import json
import logging
import sys
from types import SimpleNamespace
from unittest.mock import patch

from django.test import SimpleTestCase
from apps.core.logging import PIIMasker, JSONFormatter, SecurityLogger


class PIIMaskerTestCase(SimpleTestCase):
    """Test PII masking functionality."""

    def test_mask_email_addresses(self):
        """Test email address masking."""
        text = "Contact user@example.com or admin@test.org"
        masked = PIIMasker.mask_email(text)

        self.assertIn("u***@example.com", masked)
        self.assertNotIn("user@example.com", masked)
        self.assertIn("a****@test.org", masked)
        self.assertNotIn("admin@test.org", masked)

    def test_mask_api_keys(self):
        """Test API key masking."""
        text = 'api_key: "sk_live_abc123" and token="bearer_xyz789"'
        masked = PIIMasker.mask_api_keys(text)

        self.assertIn("api_key: ********", masked)
        self.assertNotIn("sk_live_abc123", masked)
        self.assertIn("token: ********", masked)
        self.assertNotIn("bearer_xyz789", masked)

    def test_mask_dict_sensitive_fields(self):
        """Test masking sensitive fields in dictionaries."""
        data = {
            'display_name': 'Jane Doe',
            'email': 'jane@example.com',
            'api_key': 'sk_live_abc123',
            'required_permissions': ['users.view'],
        }

        masked = PIIMasker.mask_dict(data)

        self.assertEqual(masked['display_name'], 'Jane Doe')
        self.assertEqual(masked['email'], '********')
        self.assertEqual(masked['api_key'], '********')
        self.assertEqual(masked['required_permissions'], ['users.view'])

    def test_mask_nested_dict(self):
        """Test masking nested dictionaries."""
        data = {'user': {'display_name': 'Jane', 'email': 'jane@example.com'}}

        masked = PIIMasker.mask_dict(data)

        self.assertEqual(masked['user']['display_name'], 'Jane')
        self.assertEqual(masked['user']['email'], '********')

    def test_non_strings_pass_through(self):
        self.assertEqual(PIIMasker.mask_text(42), 42)
        self.assertEqual(PIIMasker.mask_dict(['a']), ['a'])


class JSONFormatterTestCase(SimpleTestCase):
    """Test JSON log formatting."""

    def make_record(self, message, **extra):
        record = logging.LogRecord(
            name='apps.rbac.services',
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg=message,
            args=(),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_basic_fields(self):
        output = json.loads(JSONFormatter().format(self.make_record("Invalidated cache")))

        self.assertEqual(output['level'], 'INFO')
        self.assertEqual(output['logger'], 'apps.rbac.services')
        self.assertEqual(output['message'], 'Invalidated cache')
        self.assertIn('timestamp', output)

    def test_message_is_masked(self):
        output = json.loads(JSONFormatter().format(self.make_record("Login for user@example.com")))
        self.assertNotIn('user@example.com', output['message'])

    def test_request_and_user_ids_included(self):
        record = self.make_record("Permission denied", request_id='req-1', user_id=7)
        output = json.loads(JSONFormatter().format(record))

        self.assertEqual(output['request_id'], 'req-1')
        self.assertEqual(output['user_id'], '7')

    def test_extra_fields_included_and_unserializable_stringified(self):
        record = self.make_record("Dropped", dropped_permissions=['a.b'], marker=object())
        output = json.loads(JSONFormatter().format(record))

        self.assertEqual(output['dropped_permissions'], ['a.b'])
        self.assertIsInstance(output['marker'], str)

    def test_exception_info(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = self.make_record("Failure")
            record.exc_info = sys.exc_info()

        output = json.loads(JSONFormatter().format(record))

        self.assertEqual(output['exception']['type'], 'ValueError')
        self.assertEqual(output['exception']['message'], 'boom')


class SecurityLoggerTestCase(SimpleTestCase):
    """Test security event logging."""

    def test_permission_denied_logged_as_warning(self):
        user = SimpleNamespace(id='user-1')

        with self.assertLogs('security', level='WARNING') as captured:
            SecurityLogger.log_permission_denied(
                user, {'users.view', 'users'}, {'users.view'}, path='/v1/permissions/tree'
            )

        self.assertEqual(len(captured.records), 1)
        record = captured.records[0]
        self.assertEqual(record.event_type, 'permission_denied')
        self.assertEqual(record.required_permissions, ['users', 'users.view'])
        self.assertEqual(record.missing_permissions, ['users.view'])
        self.assertEqual(record.user_id, 'user-1')

    def test_permission_denied_not_sent_to_sentry(self):
        with patch('apps.core.logging.sentry_sdk.capture_message') as capture:
            with self.assertLogs('security', level='WARNING'):
                SecurityLogger.log_permission_denied(SimpleNamespace(id='u'), {'a'}, {'a'})
        capture.assert_not_called()

    def test_cache_invalidation_failure_is_critical(self):
        with patch('apps.core.logging.sentry_sdk.capture_message') as capture:
            with self.assertLogs('security', level='ERROR') as captured:
                SecurityLogger.log_cache_invalidation_failed(user_ids=['u1', 'u2'])

        self.assertEqual(captured.records[0].user_ids, ['u1', 'u2'])
        self.assertEqual(captured.records[0].scope, 'user')
        capture.assert_called_once()
