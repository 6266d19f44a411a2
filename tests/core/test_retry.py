import pytest
from unittest.mock import MagicMock, patch
from botocore.exceptions import ClientError
from leftovers.core.retry import retry_throttled


def test_retry_throttled_success():
    mock_op = MagicMock(return_value="success")
    result = retry_throttled(mock_op, "test op")
    assert result == "success"
    assert mock_op.call_count == 1


def test_retry_throttled_throttling():
    # Simulate throttling then success
    error_response = {'Error': {'Code': 'Throttling'}}
    throttling_error = ClientError(error_response, 'test')

    mock_op = MagicMock(side_effect=[throttling_error, throttling_error, "success"])

    with patch('time.sleep') as mock_sleep:
        result = retry_throttled(mock_op, "test op")

    assert result == "success"
    assert mock_op.call_count == 3
    assert mock_sleep.call_count == 2


def test_retry_throttled_other_error():
    error_response = {'Error': {'Code': 'AccessDenied'}}
    other_error = ClientError(error_response, 'test')

    mock_op = MagicMock(side_effect=other_error)

    with pytest.raises(ClientError):
        retry_throttled(mock_op, "test op")

    assert mock_op.call_count == 1


def test_retry_throttled_gives_up():
    error_response = {'Error': {'Code': 'RequestLimitExceeded'}}
    throttling_error = ClientError(error_response, 'test')

    mock_op = MagicMock(side_effect=throttling_error)

    with patch('time.sleep'):
        with pytest.raises(ClientError):
            retry_throttled(mock_op, "test op", max_attempts=3)

    assert mock_op.call_count == 3
