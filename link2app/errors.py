# link2app/errors.py
from __future__ import annotations

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    MISSING_CREDENTIAL = "missing_credential"
    TRANSPORT_ERROR = "transport_error"
    PROVIDER_ERROR = "provider_error"
    INVALID_RESPONSE = "invalid_response"
    IO_ERROR = "io_error"
    ANALYSIS_FAILED = "analysis_failed"


class Link2AppError(Exception):
    """Base error. Every failure surfaced to a user carries a FailureKind tag."""

    kind: FailureKind = FailureKind.PROVIDER_ERROR


class MissingCredentialError(Link2AppError):
    kind = FailureKind.MISSING_CREDENTIAL

    def __init__(self, provider: str, setting: str):
        self.provider = provider
        self.setting = setting
        super().__init__(f"{setting} is required for the {provider} provider")


class TransportError(Link2AppError):
    kind = FailureKind.TRANSPORT_ERROR


class ProviderError(Link2AppError):
    """Non-2xx answer from a provider. `message` is the raw response body."""

    kind = FailureKind.PROVIDER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None, provider: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.provider = provider
        prefix = f"{provider} error" if provider else "API error"
        if status_code is not None:
            prefix += f" {status_code}"
        super().__init__(f"{prefix}: {message}")


class InvalidResponseError(Link2AppError):
    kind = FailureKind.INVALID_RESPONSE


class ExportError(Link2AppError):
    kind = FailureKind.IO_ERROR


class WebsiteAnalysisError(Link2AppError):
    kind = FailureKind.ANALYSIS_FAILED


__all__ = [
    "FailureKind",
    "Link2AppError",
    "MissingCredentialError",
    "TransportError",
    "ProviderError",
    "InvalidResponseError",
    "ExportError",
    "WebsiteAnalysisError",
]
