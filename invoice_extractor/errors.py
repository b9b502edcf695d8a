"""Failure taxonomy for the invoice extraction pipeline"""
from enum import Enum
from typing import Dict, List, Optional


class FailureKind(str, Enum):
    """Caller-facing failure categories"""
    EMPTY_DOCUMENT = "empty_document"
    CORRUPT_DOCUMENT = "corrupt_document"
    CONFIGURATION = "configuration"
    CREDENTIAL = "credential"
    SERVICE_UNAVAILABLE = "service_unavailable"
    QUOTA_EXCEEDED = "quota_exceeded"
    RESPONSE_FORMAT = "response_format"
    SCHEMA_VALIDATION = "schema_validation"
    PROCESSING = "processing"


class InvoiceExtractionError(Exception):
    """
    Base class for every classified pipeline failure.

    Subclasses pin ``kind`` and ``status_code`` (the HTTP-equivalent status a
    route layer would answer with). The message is safe to show to callers.
    """
    kind = FailureKind.PROCESSING
    status_code = 500
    default_message = "Failed to process invoice"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> Dict:
        """Error body in the shape returned to API clients"""
        return {
            "success": False,
            "error": self.message,
            "kind": self.kind.value,
        }


class EmptyDocumentError(InvoiceExtractionError):
    kind = FailureKind.EMPTY_DOCUMENT
    status_code = 422
    default_message = "PDF appears to be empty or contains no readable text"


class CorruptDocumentError(InvoiceExtractionError):
    kind = FailureKind.CORRUPT_DOCUMENT
    status_code = 400
    default_message = "PDF could not be decoded"


class ConfigurationError(InvoiceExtractionError):
    """Generation service credentials or settings are missing (server side)"""
    kind = FailureKind.CONFIGURATION
    status_code = 500
    default_message = "Generation service is not configured"


class CredentialError(InvoiceExtractionError):
    """The generation service rejected the configured credentials"""
    kind = FailureKind.CREDENTIAL
    status_code = 502
    default_message = "Invalid API key. Please check your configuration."


class ServiceUnavailableError(InvoiceExtractionError):
    kind = FailureKind.SERVICE_UNAVAILABLE
    status_code = 503
    default_message = "Generation service is unreachable. Please try again later."


class QuotaExceededError(InvoiceExtractionError):
    kind = FailureKind.QUOTA_EXCEEDED
    status_code = 429
    default_message = "API quota exceeded. Please try again later."


class ResponseFormatError(InvoiceExtractionError):
    """
    No JSON object could be recovered from the model reply.

    ``detail`` holds the parser diagnostics. The raw reply itself is never
    attached; it is only logged.
    """
    kind = FailureKind.RESPONSE_FORMAT
    status_code = 502
    default_message = "Failed to parse AI response"

    def __init__(self, message: Optional[str] = None, detail: Optional[str] = None):
        self.detail = detail
        if message and detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SchemaValidationError(InvoiceExtractionError):
    kind = FailureKind.SCHEMA_VALIDATION
    status_code = 422
    default_message = "Invoice data validation failed"

    def __init__(self, violations: List[str]):
        self.violations = list(violations)
        super().__init__(f"{self.default_message}: {', '.join(self.violations)}")

    def to_dict(self) -> Dict:
        body = super().to_dict()
        body["violations"] = list(self.violations)
        return body


class ProcessingError(InvoiceExtractionError):
    """Fallback for failures that match no other kind"""
    kind = FailureKind.PROCESSING
    status_code = 500
