"""Unit tests for error handling."""

from unifi_monitor.utils.errors import ConfigurationError, ErrorCodes, MonitorError, SourceError


class TestMonitorError:
    """Test MonitorError base class."""

    def test_basic_error(self):
        """Test basic error creation."""
        error = MonitorError(message='Something went wrong', error_code='TEST_ERROR')

        assert error.error_code == 'TEST_ERROR'
        assert error.message == 'Something went wrong'
        assert error.suggestion is None
        assert error.retryable is False

    def test_error_formatting_basic(self):
        """Test basic error formatting."""
        error = MonitorError(message='Test error', error_code='TEST')
        assert str(error) == '[TEST] Test error'

    def test_error_formatting_with_suggestion(self):
        """Test error formatting with suggestion."""
        error = MonitorError(message='Test error', error_code='TEST', suggestion='Try this fix')
        assert str(error) == '[TEST] Test error\nSuggestion: Try this fix'

    def test_to_dict(self):
        """Test conversion to dictionary."""
        error = MonitorError(message='Test error', error_code='TEST')

        assert error.to_dict() == {
            'error_code': 'TEST',
            'message': 'Test error',
            'suggestion': '',
            'retryable': False,
        }


class TestConfigurationError:
    """Test ConfigurationError."""

    def test_defaults(self):
        """Test code and default suggestion."""
        error = ConfigurationError('missing UNIFI_API_KEY')

        assert error.error_code == ErrorCodes.NOT_CONFIGURED
        assert error.retryable is False
        assert 'UNIFI_API_URL' in error.suggestion
        assert isinstance(error, MonitorError)

    def test_custom_suggestion(self):
        """Test suggestion override."""
        error = ConfigurationError('bad url', suggestion='Use the site API root')
        assert error.suggestion == 'Use the site API root'

    def test_not_a_source_error(self):
        """Test configuration errors are never treated as source failures."""
        assert not isinstance(ConfigurationError('x'), SourceError)


class TestSourceError:
    """Test SourceError."""

    def test_defaults(self):
        """Test default code and retryability."""
        error = SourceError('controller down')

        assert error.error_code == ErrorCodes.API_ERROR
        assert error.status_code is None
        assert error.retryable is True
        assert error.to_dict()['retryable'] is True

    def test_status_code(self):
        """Test status code is kept."""
        error = SourceError('rejected', error_code=ErrorCodes.AUTHENTICATION_FAILED, status_code=401)

        assert error.status_code == 401
        assert str(error) == '[AUTHENTICATION_FAILED] rejected'


class TestErrorCodes:
    """Test error code constants."""

    def test_codes_are_strings(self):
        """Test codes match their names."""
        for name in (
            'NOT_CONFIGURED',
            'CONTROLLER_UNREACHABLE',
            'AUTHENTICATION_FAILED',
            'API_ERROR',
            'TIMEOUT',
            'INVALID_RESPONSE',
        ):
            assert getattr(ErrorCodes, name) == name
