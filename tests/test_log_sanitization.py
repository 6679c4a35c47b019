"""
Verifies that backend credentials are redacted from logs.
"""

from media_stats.logging_config import sanitize_secrets


class TestLogSanitization:
    """Tests for secret sanitization processor."""

    def test_redact_app_secret(self):
        event_dict = {'event': 'Creating stats service', 'app_secret': 'abcdef123456'}
        result = sanitize_secrets(None, None, event_dict)

        assert result['app_secret'] == 'ab***REDACTED***'
        assert result['event'] == 'Creating stats service'

    def test_redact_key_path(self):
        result = sanitize_secrets(None, None, {'key_path': '/etc/keys/ecdsa.pem'})
        assert result['key_path'] == '/e***REDACTED***'

    def test_short_value_fully_redacted(self):
        result = sanitize_secrets(None, None, {'secret': 'abc'})
        assert result['secret'] == '***REDACTED***'

    def test_case_and_separator_insensitive(self):
        result = sanitize_secrets(None, None, {'APP-SECRET': 'abcdef', 'Authorization': 'Bearer xyz'})
        assert 'REDACTED' in result['APP-SECRET']
        assert 'REDACTED' in result['Authorization']

    def test_nested_dict(self):
        event_dict = {'credentials_info': {'app_secret': 'abcdef', 'app_id': 42}}
        result = sanitize_secrets(None, None, event_dict)

        assert result['credentials_info']['app_secret'] == 'ab***REDACTED***'
        assert result['credentials_info']['app_id'] == 42

    def test_dicts_in_lists(self):
        result = sanitize_secrets(None, None, {'services': [{'app_secret': 'abcdef'}, 'plain']})
        assert result['services'][0]['app_secret'] == 'ab***REDACTED***'
        assert result['services'][1] == 'plain'

    def test_booleans_and_none_preserved(self):
        result = sanitize_secrets(None, None, {'secret': True, 'token': None})
        assert result['secret'] is True
        assert result['token'] is None

    def test_ordinary_fields_untouched(self):
        event_dict = {
            'event': 'Report submitted',
            'conference_id': 'conf/room1',
            'endpoint_id': 'ep1',
            'key_id': 'key-1',
            'uc_id': 'uc-1',
            'passthrough': 'yes',
        }
        assert sanitize_secrets(None, None, dict(event_dict)) == event_dict
