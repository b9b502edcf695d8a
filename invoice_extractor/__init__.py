"""Invoice PDF to structured record extraction"""
from .errors import (
    ConfigurationError,
    CorruptDocumentError,
    CredentialError,
    EmptyDocumentError,
    FailureKind,
    InvoiceExtractionError,
    ProcessingError,
    QuotaExceededError,
    ResponseFormatError,
    SchemaValidationError,
    ServiceUnavailableError,
)
from .extractor import InvoiceExtractor, build_extraction_prompt
from .models import InvoiceRecord, LineItem

__version__ = "0.1.0"
