"""
Assertion helpers for API tests
"""
from typing import Optional, List, Dict, Any
from httpx import Response


def assert_error_response(
    response: Response,
    status_code: int,
    error_code: Optional[str] = None,
    message_contains: Optional[str] = None
):
    """
    Check that a response is an error envelope with the given details.

    Args:
        response: HTTP response
        status_code: Expected status code
        error_code: Expected error code (optional)
        message_contains: Text the message must contain (optional)
    """
    assert response.status_code == status_code, \
        f"Expected status {status_code}, got {response.status_code}. Response: {response.text}"

    data = response.json()

    if error_code:
        assert "error_code" in data, f"Response should contain 'error_code'. Got: {data}"
        assert data["error_code"] == error_code, \
            f"Expected error_code '{error_code}', got '{data.get('error_code')}'"

    if message_contains:
        assert "message" in data, f"Response should contain 'message'. Got: {data}"
        assert message_contains.lower() in data["message"].lower(), \
            f"Message should contain '{message_contains}'. Got: {data['message']}"


def assert_sync_result(
    response: Response,
    processed: int,
    unprocessed: int = 0,
    records: Optional[List[Dict[str, Any]]] = None
):
    """
    Check the run result returned by the upload endpoint.

    Args:
        response: HTTP response
        processed: Expected processedCount
        unprocessed: Expected unprocessedCount (default: 0)
        records: Expected unprocessedRecords (optional)
    """
    assert response.status_code == 200, \
        f"Expected status 200, got {response.status_code}. Response: {response.text}"

    data = response.json()
    assert data["processedCount"] == processed, f"Unexpected processedCount in {data}"
    assert data["unprocessedCount"] == unprocessed, f"Unexpected unprocessedCount in {data}"

    if records is not None:
        assert data["unprocessedRecords"] == records
