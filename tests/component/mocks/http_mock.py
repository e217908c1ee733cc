"""
HTTP Client Mock for Component Testing

Mocks httpx.AsyncClient for provider and inter-service HTTP calls.
"""
import fnmatch
from typing import Any, Dict, List, Optional

import httpx


class MockHttpResponse:
    """Mock HTTP response"""

    def __init__(
        self,
        status_code: int = 200,
        json_data: Optional[Any] = None,
        text: str = "",
        headers: Optional[Dict[str, str]] = None,
        method: str = "GET",
        url: str = "",
    ):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text or (str(json_data) if json_data is not None else "")
        self.headers = headers or {}
        self.content = self.text.encode()
        self._method = method
        self._url = url

    def json(self) -> Any:
        if self._json_data is None:
            raise ValueError("Response body is not JSON")
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}: {self.text}",
                request=httpx.Request(self._method, self._url or "http://mock"),
                response=self,
            )


class MockHttpClient:
    """Mock for httpx.AsyncClient"""

    def __init__(self):
        self.requests: List[Dict[str, Any]] = []
        self._responses: Dict[str, List[MockHttpResponse]] = {}
        self._default_response = MockHttpResponse(200, {"success": True})
        self._should_raise: Optional[Exception] = None
        self.is_closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    async def aclose(self):
        self.is_closed = True

    async def get(self, url: str, **kwargs) -> MockHttpResponse:
        """Mock GET request"""
        return await self._make_request("GET", url, **kwargs)

    async def post(self, url: str, **kwargs) -> MockHttpResponse:
        """Mock POST request"""
        return await self._make_request("POST", url, **kwargs)

    async def _make_request(self, method: str, url: str, **kwargs) -> MockHttpResponse:
        """Internal request handler"""
        self.requests.append({
            "method": method,
            "url": url,
            **kwargs
        })

        if self._should_raise:
            raise self._should_raise

        key = f"{method}:{url}"
        if key not in self._responses:
            key = next(
                (
                    pattern for pattern in self._responses
                    if "*" in pattern
                    and pattern.split(":", 1)[0] == method
                    and fnmatch.fnmatch(url, pattern.split(":", 1)[1])
                ),
                None
            )
        if key is None:
            return self._default_response

        queue = self._responses[key]
        # The last queued response repeats once the queue is drained
        return queue.pop(0) if len(queue) > 1 else queue[0]

    # Test helper methods

    def set_response(
        self,
        method: str,
        url: str,
        status_code: int = 200,
        json_data: Optional[Any] = None,
        text: str = ""
    ):
        """Set response for specific method and URL, replacing queued ones"""
        self._responses[f"{method}:{url}"] = [
            MockHttpResponse(status_code, json_data, text, method=method, url=url)
        ]

    def queue_response(
        self,
        method: str,
        url: str,
        status_code: int = 200,
        json_data: Optional[Any] = None,
        text: str = ""
    ):
        """Append a response; queued responses are returned in order"""
        self._responses.setdefault(f"{method}:{url}", []).append(
            MockHttpResponse(status_code, json_data, text, method=method, url=url)
        )

    def set_default_response(self, status_code: int = 200, json_data: Optional[Any] = None):
        """Set default response for unmatched requests"""
        self._default_response = MockHttpResponse(status_code, json_data)

    def set_error(self, error: Exception):
        """Set an error to be raised on every request"""
        self._should_raise = error

    def clear_error(self):
        """Clear any pending error"""
        self._should_raise = None

    def get_requests(self, method: Optional[str] = None, url: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get recorded requests, optionally filtered by method and URL"""
        return [
            r for r in self.requests
            if (method is None or r["method"] == method) and (url is None or r["url"] == url)
        ]

    def get_last_request(self) -> Optional[Dict[str, Any]]:
        """Get the last recorded request"""
        return self.requests[-1] if self.requests else None

    def assert_request_made(self, method: str, url_pattern: str):
        """Assert that a request was made"""
        for req in self.requests:
            if req["method"] == method and fnmatch.fnmatch(req["url"], url_pattern):
                return req
        raise AssertionError(
            f"No {method} request matching '{url_pattern}' was made. Requests: {self.requests}"
        )

    def assert_no_requests(self):
        """Assert that no requests were made"""
        assert len(self.requests) == 0, f"Expected no requests, but got: {self.requests}"
