"""Translation of gateway errors into HTTP responses."""

from fastapi import HTTPException

from provider_gateway.providers.errors import (
    AuthenticationError,
    CredentialError,
    GatewayError,
    MalformedResponseError,
    NetworkError,
    ProviderAPIError,
    RateLimitError,
    UnsupportedProviderError,
    ValidationError,
)

# First match wins, so subclasses come before their parents.
_STATUS_BY_ERROR = (
    (ValidationError, 422),
    (UnsupportedProviderError, 400),
    (CredentialError, 500),
    (RateLimitError, 429),
    (NetworkError, 504),
    (AuthenticationError, 502),
    (MalformedResponseError, 502),
    (ProviderAPIError, 502),
)


def http_error_for(exc: GatewayError, prefix: str = "") -> HTTPException:
    """Build the HTTPException for a classified gateway error."""
    status_code = 500
    for error_class, code in _STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            status_code = code
            break
    detail = f"{prefix}{exc}" if prefix else str(exc)
    return HTTPException(status_code=status_code, detail=detail)
