"""
Core HTTP client for the Mollie API.

Handles authentication, request building, response buffering, pagination, and
error translation.
"""

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar

from mollie_cli.core.config import Config
from mollie_cli.core.types import ErrorEnvelope, ListEnvelope, clean_params

USER_AGENT = "mollie-cli/0.1.0"

logger = logging.getLogger(__name__)

T = TypeVar("T")
E = TypeVar("E", bound=ListEnvelope)


class CLIError(Exception):
    """Base error class for CLI errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(CLIError):
    """Missing or invalid client configuration (base URL, token)."""


class TransportError(CLIError):
    """The request never produced an HTTP response."""


class DecodeError(CLIError):
    """A response body could not be decoded."""

    def __init__(self, message: str, response: "Response | None" = None, details: dict | None = None):
        super().__init__(message, details)
        self.response = response


class APIError(CLIError):
    """API error with status code and the remote error detail."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        title: str | None = None,
        field: str | None = None,
        details: dict | None = None,
        response: "Response | None" = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.title = title
        self.field = field
        self.response = response

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        if self.title:
            result["title"] = self.title
        if self.field:
            result["field"] = self.field
        return result


class ValidationError(CLIError):
    """Validation error for local input/data issues (not API errors)."""


@dataclass
class Response:
    """
    A completed HTTP exchange.

    The body is read once and kept in ``content`` so callers can decode it as
    many times as they need.
    """

    request: urllib.request.Request
    status: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the buffered body as JSON."""
        try:
            return json.loads(self.content.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(f"Invalid JSON response: {e}", response=self) from e


class APIClient:
    """
    Low-level HTTP client for the Mollie API.

    Handles:
    - Bearer token authentication
    - HTTP methods (GET, POST, PATCH, DELETE)
    - Error handling and response decoding
    - Cursor pagination for list endpoints
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        config: Config | None = None,
        timeout: int | None = None,
        opener: urllib.request.OpenerDirector | None = None,
    ):
        """
        Initialize the API client.

        Args:
            token: API key or organization access token (or MOLLIE_API_TOKEN / MOLLIE_ORG_TOKEN env var)
            base_url: API base URL (or MOLLIE_BASE_URL env var)
            config: Client settings, read from the environment when omitted
            timeout: Request timeout override in seconds
            opener: urllib opener used to execute requests

        """
        self.config = config or Config.from_env()
        self.token = token or self.config.token_from_env()
        self.base_url = base_url if base_url is not None else self.config.base_url
        self.timeout = timeout or self.config.timeout
        self.opener = opener or urllib.request.build_opener()

    def set_auth_token(self, token: str) -> None:
        """Replace the token used for subsequent requests."""
        self.token = token

    def _ensure_token(self) -> str:
        """Ensure an auth token is configured."""
        if not self.token:
            raise ConfigurationError(f"{self.config.token_env} environment variable not set")
        return self.token

    def _ensure_base_url(self) -> str:
        """Validate the base URL, which must end with a trailing slash."""
        if not self.base_url:
            raise ConfigurationError("Base URL not set. Set MOLLIE_BASE_URL or pass base_url")
        try:
            parsed = urllib.parse.urlsplit(self.base_url)
            # Accessing port validates it
            parsed.port
        except ValueError as e:
            raise ConfigurationError(f"Invalid base URL {self.base_url!r}: {e}") from e
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(f"Invalid base URL {self.base_url!r}: expected http(s)://host/")
        if not self.base_url.endswith("/"):
            raise ConfigurationError(f"Invalid base URL {self.base_url!r}: it must end with a trailing slash")
        return self.base_url

    def _encode_query(self, query: Any) -> dict[str, str]:
        """Turn a mapping or options object into query parameters."""
        if query is None:
            params: dict[str, str] = {}
        elif hasattr(query, "to_params"):
            params = query.to_params()
        else:
            params = clean_params(query)
        if self.config.send_testmode:
            params["testmode"] = "true"
        return params

    def _build_url(self, path: str, query: Any = None) -> str:
        """Build full URL from path and query."""
        url = f"{self._ensure_base_url()}{path.lstrip('/')}"
        params = self._encode_query(query)
        if params:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}{urllib.parse.urlencode(params)}"
        return url

    def execute(
        self,
        method: str,
        path: str,
        query: Any = None,
        body: Any = None,
        timeout: int | None = None,
    ) -> Response:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PATCH, DELETE)
            path: API path relative to the base URL (e.g., v2/customers/{id})
            query: Query options (mapping or object with to_params())
            body: Request body (mapping or object with to_dict())
            timeout: Request timeout override

        Returns:
            Response with the buffered body

        Raises:
            ConfigurationError: On a missing token or invalid base URL
            TransportError: When no HTTP response was received
            APIError: On non-2xx responses
            DecodeError: When the error body is not valid JSON

        """
        url = self._build_url(path, query)
        token = self._ensure_token()

        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

        data = None
        if body is not None:
            payload = body.to_dict() if hasattr(body, "to_dict") else body
            data = json.dumps(payload).encode("utf-8")
        request_timeout = timeout or self.timeout

        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        logger.debug("%s %s", method, url)

        try:
            with self.opener.open(req, timeout=request_timeout) as raw:
                response = Response(
                    request=req,
                    status=raw.status,
                    reason=raw.reason or "",
                    headers=dict(raw.headers.items()),
                    content=raw.read(),
                )

        except urllib.error.HTTPError as e:
            response = Response(
                request=req,
                status=e.code,
                reason=e.reason or "",
                headers=dict(e.headers.items()) if e.headers else {},
                content=e.read(),
            )

        except urllib.error.URLError as e:
            logger.warning("%s %s failed: %s", method, url, e.reason)
            raise TransportError(f"Connection error: {e.reason}") from e

        except TimeoutError as e:
            logger.warning("%s %s timed out", method, url)
            raise TransportError(f"Request timed out after {request_timeout} seconds") from e

        except (http.client.HTTPException, OSError) as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise TransportError(f"Connection error: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status)

        if not response.ok:
            raise self._error_for(response)
        return response

    @staticmethod
    def _error_for(response: Response) -> CLIError:
        """Translate a failed response into an APIError (or DecodeError)."""
        if not response.content.strip():
            message = response.reason or f"HTTP {response.status}"
            return APIError(message, status=response.status, title=response.reason or None, response=response)

        try:
            envelope = ErrorEnvelope.from_dict(response.json())
        except DecodeError as e:
            return e
        except TypeError as e:
            return DecodeError(f"Invalid error response: {e}", response=response)

        message = envelope.detail or envelope.title or response.reason or f"HTTP {response.status}"
        return APIError(
            message,
            status=envelope.status or response.status,
            title=envelope.title or response.reason or None,
            field=envelope.field,
            details=envelope.to_dict(),
            response=response,
        )

    def decode(self, response: Response, parser: Callable[[Any], T]) -> T:
        """
        Decode a successful response body with a resource parser.

        The decoded value keeps a reference to the response in ``.response``.

        Raises:
            DecodeError: On malformed JSON or a payload of the wrong shape

        """
        data = response.json()
        try:
            value = parser(data)
        except (KeyError, TypeError, ValueError) as e:
            raise DecodeError(f"Unexpected response payload: {e}", response=response) from e
        if hasattr(value, "response"):
            value.response = response
        return value

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(self, path: str, query: Any = None) -> Response:
        """Make a GET request."""
        return self.execute("GET", path, query=query)

    def post(self, path: str, body: Any = None, query: Any = None) -> Response:
        """Make a POST request."""
        return self.execute("POST", path, query=query, body=body)

    def patch(self, path: str, body: Any = None) -> Response:
        """Make a PATCH request."""
        return self.execute("PATCH", path, body=body)

    def delete(self, path: str, body: Any = None) -> Response:
        """Make a DELETE request."""
        return self.execute("DELETE", path, body=body)

    # =========================================================================
    # Pagination
    # =========================================================================

    def paginate(
        self,
        path: str,
        parser: Callable[[Any], E],
        query: Any = None,
    ) -> Iterator[Any]:
        """
        Iterate through all pages of a list endpoint.

        Follows the ``from`` cursor of each page's ``next`` link.

        Args:
            path: API path of the list endpoint
            parser: List envelope parser (e.g., CustomersList.from_dict)
            query: Query options for the first page

        Yields:
            Items from all pages

        """
        # testmode is added by get() on every page
        params = query.to_params() if hasattr(query, "to_params") else clean_params(query or {})
        while True:
            page = self.decode(self.get(path, params), parser)
            yield from page.items

            cursor = page.next_from
            if not cursor or not page.items:
                break
            params = {**params, "from": cursor}
