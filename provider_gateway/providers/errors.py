"""Error taxonomy for vendor calls and the helpers that classify raw failures into it.

Every adapter funnels transport failures, non-2xx statuses and undecodable
bodies through this module, so the orchestrators only ever see the classes
below and can react per class:

* the connection tester persists any of ``CONNECTION_FAILURES`` as an
  ``error`` status,
* the model synchronizer and the chat gateway re-raise them.
"""

from typing import Any, Dict, Iterable, Optional

import httpx


class GatewayError(Exception):
    """Base exception for all provider gateway errors."""

    kind = "gateway"

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.provider = provider

    def __str__(self) -> str:
        if self.provider:
            return f"[{self.provider}] {self.message}"
        return self.message


class UnsupportedProviderError(GatewayError):
    """Raised when a provider identifier is outside the supported set."""

    kind = "unsupported_provider"


class ValidationError(GatewayError):
    """Raised when a caller-supplied request is invalid; checked before any network call."""

    kind = "validation"


class AuthenticationError(GatewayError):
    """Raised when the vendor rejects the API key (401/403)."""

    kind = "authentication"


class CredentialError(AuthenticationError):
    """Raised when a stored API key cannot be decrypted."""

    kind = "credential"


class RateLimitError(GatewayError):
    """Raised when the vendor reports rate limiting (429)."""

    kind = "rate_limit"


class NetworkError(GatewayError):
    """Raised on connect failures and timeouts."""

    kind = "network"


class MalformedResponseError(GatewayError):
    """Raised when a vendor body is not JSON or lacks required fields."""

    kind = "malformed_response"


class ProviderAPIError(GatewayError):
    """Raised for any other non-2xx vendor response."""

    kind = "provider_api"

    def __init__(self, message: str, provider: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, provider)
        self.status_code = status_code


# Classified failures a connection test turns into a persisted ``error`` status.
CONNECTION_FAILURES = (
    UnsupportedProviderError,
    AuthenticationError,
    RateLimitError,
    NetworkError,
    MalformedResponseError,
    ProviderAPIError,
)

# Classified vendor-side failures a chat completion or sync re-raises.
VENDOR_FAILURES = (
    AuthenticationError,
    RateLimitError,
    NetworkError,
    MalformedResponseError,
    ProviderAPIError,
)


def _error_detail(response: httpx.Response) -> str:
    """Best-effort extraction of the vendor's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("message"):
            return str(body["message"])
    return f"HTTP {response.status_code}"


def classify_status(provider: str, response: httpx.Response) -> None:
    """Raise the classified error for a non-2xx response; return silently otherwise.

    Args:
        provider: Vendor identifier used to annotate the error.
        response: The vendor's HTTP response.

    Raises:
        AuthenticationError: On 401 or 403.
        RateLimitError: On 429.
        ProviderAPIError: On any other status outside 2xx.
    """
    status_code = response.status_code
    if 200 <= status_code < 300:
        return

    detail = _error_detail(response)
    if status_code in (401, 403):
        raise AuthenticationError(f"Authentication failed ({status_code}): {detail}", provider)
    if status_code == 429:
        raise RateLimitError(f"Rate limit exceeded: {detail}", provider)
    raise ProviderAPIError(f"Vendor returned HTTP {status_code}: {detail}", provider, status_code)


def classify_transport_error(provider: str, exc: httpx.HTTPError) -> GatewayError:
    """Map an httpx transport exception onto the taxonomy."""
    if isinstance(exc, httpx.TimeoutException):
        return NetworkError(f"Request timed out: {exc}", provider)
    if isinstance(exc, httpx.HTTPStatusError):
        try:
            classify_status(provider, exc.response)
        except GatewayError as classified:
            return classified
    return NetworkError(f"Request failed: {exc}", provider)


def decode_json(provider: str, response: httpx.Response, required: Iterable[str] = ()) -> Dict[str, Any]:
    """Decode a vendor body, requiring a JSON object that carries ``required`` keys.

    Raises:
        MalformedResponseError: If the body is not JSON, not an object, or
            misses a required key.
    """
    try:
        data = response.json()
    except ValueError as e:
        raise MalformedResponseError(f"Response is not valid JSON: {e}", provider) from e

    if not isinstance(data, dict):
        raise MalformedResponseError(
            f"Expected a JSON object, got {type(data).__name__}", provider
        )

    missing = [key for key in required if key not in data]
    if missing:
        raise MalformedResponseError(
            f"Response is missing required fields: {', '.join(missing)}", provider
        )
    return data
