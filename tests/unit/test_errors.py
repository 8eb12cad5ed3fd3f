"""Tests for error handling utilities."""

from dynamodb_proxy.errors import ErrorCode, ProxyError, handle_error


class TestProxyError:
    """Tests for ProxyError class."""

    def test_proxy_error_with_message(self) -> None:
        """Test creating ProxyError with message."""
        error = ProxyError(ErrorCode.UNSUPPORTED_ACTION, "Unsupported DynamoDB action: 'Scan'")

        assert error.error_code == ErrorCode.UNSUPPORTED_ACTION
        assert error.message == "Unsupported DynamoDB action: 'Scan'"
        assert error.details == {}
        assert str(error) == error.message

    def test_proxy_error_to_dict(self) -> None:
        """Test converting ProxyError to dict."""
        error = ProxyError(ErrorCode.LOGICAL_ID_COLLISION, "Duplicate", {"logicalId": "ApiGatewayMethodGet"})

        result = error.to_dict()

        assert result == {
            "errorCode": ErrorCode.LOGICAL_ID_COLLISION,
            "message": "Duplicate",
            "logicalId": "ApiGatewayMethodGet",
        }


class TestHandleError:
    """Tests for handle_error function."""

    def test_handle_proxy_error(self) -> None:
        """Test handling ProxyError returns its dict."""
        error = ProxyError(ErrorCode.INVALID_EVENT, "Bad event", {"missingFields": ["path"]})

        result = handle_error(error)

        assert result["errorCode"] == ErrorCode.INVALID_EVENT
        assert result["missingFields"] == ["path"]

    def test_handle_generic_exception(self) -> None:
        """Test handling generic exception returns internal error."""
        result = handle_error(ValueError("boom"))

        assert result["errorCode"] == ErrorCode.INTERNAL_ERROR
        assert "boom" in result["message"]
