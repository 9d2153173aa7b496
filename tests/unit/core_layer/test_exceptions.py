"""
Unit Tests for Core Exceptions

Tests the exception hierarchy and its structured-logging helpers.
"""

import pytest

from fieldcache.core.exceptions import (
    CacheConnectionError,
    CacheError,
    CacheOperationError,
    ConfigurationError,
    FieldCacheError,
)


@pytest.mark.unit
class TestFieldCacheError:
    """Test the base exception class."""

    def test_base_error_creation(self):
        error = FieldCacheError("Test message")
        assert str(error) == "Test message"
        assert error.message == "Test message"

    def test_base_error_default_values(self):
        error = FieldCacheError("Test")
        assert error.details == {}
        assert error.worker_id is None

    def test_details_are_copied(self):
        """External mutation of the details dict must not leak into the error."""
        details = {"hosts": ["a"]}
        error = FieldCacheError("Test", details=details)
        details["extra"] = True

        assert "extra" not in error.details

    def test_to_dict(self):
        error = CacheConnectionError("down", worker_id="worker-1", details={"hosts": ["h"]})

        assert error.to_dict() == {
            "error_type": "CacheConnectionError",
            "message": "down",
            "worker_id": "worker-1",
            "details": {"hosts": ["h"]},
        }

    def test_with_suggestion_and_context_chain(self):
        error = ConfigurationError("bad ttl").with_suggestion("use 0 for no expiry").with_context(option="ttl")

        assert isinstance(error, ConfigurationError)
        assert error.details == {"suggestion": "use 0 for no expiry", "option": "ttl"}

    def test_repr_includes_worker_and_details(self):
        error = CacheOperationError("nope", worker_id="w", details={"key": "k"})

        text = repr(error)
        assert text.startswith("CacheOperationError(message='nope'")
        assert "worker_id='w'" in text
        assert "'key': 'k'" in text

    def test_from_exception_wraps_original(self):
        original = OSError("connection refused")

        error = CacheConnectionError.from_exception(original, hosts=["localhost"])

        assert isinstance(error, CacheConnectionError)
        assert error.message == "connection refused"
        assert error.details["original_error"] == "OSError"
        assert error.details["original_message"] == "connection refused"
        assert error.details["hosts"] == ["localhost"]

    def test_from_exception_custom_message(self):
        error = CacheOperationError.from_exception(ValueError("x"), message="set failed")
        assert error.message == "set failed"


@pytest.mark.unit
class TestHierarchy:
    """Test exception inheritance."""

    @pytest.mark.parametrize("error_cls", [CacheConnectionError, CacheOperationError])
    def test_cache_errors_are_cache_errors(self, error_cls):
        error = error_cls("x")
        assert isinstance(error, CacheError)
        assert isinstance(error, FieldCacheError)
        assert isinstance(error, Exception)

    def test_connection_and_operation_errors_are_distinct(self):
        assert not issubclass(CacheOperationError, CacheConnectionError)
        assert not issubclass(CacheConnectionError, CacheOperationError)

    def test_configuration_error_is_not_a_cache_error(self):
        assert not isinstance(ConfigurationError("x"), CacheError)
