"""Main extraction orchestrator"""
import logging
from pathlib import Path
from typing import Optional, Protocol, Union

from . import config
from .errors import ResponseFormatError
from .llm_client import GenerationService, ServiceHandle, classify_service_failure
from .models import InvoiceRecord
from .response_recoverer import ResponseRecoverer
from .schema_validator import SchemaValidator
from .text_extractor import TextExtractor

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = """You are an expert invoice data extraction system. Analyze the following invoice text and extract structured data.

INVOICE TEXT:
{raw_text}

INSTRUCTIONS:
1. Extract the invoice number, vendor name, date, and total amount
2. Extract all line items with their name, quantity, and price
3. Return ONLY valid JSON with no additional text or markdown
4. Use the exact format shown below
5. Ensure all numbers are valid (no currency symbols)
6. Date should be in ISO format (YYYY-MM-DD)

REQUIRED JSON FORMAT:
{{
  "invoiceNumber": "string",
  "vendor": "string",
  "date": "YYYY-MM-DD",
  "total": number,
  "items": [
    {{
      "name": "string",
      "quantity": number,
      "price": number
    }}
  ]
}}

Return only the JSON object, nothing else.
"""


def build_extraction_prompt(raw_text: str) -> str:
    """Embed the document text verbatim into the extraction instructions"""
    return PROMPT_TEMPLATE.format(raw_text=raw_text)


class InvoiceStore(Protocol):
    """Persistence collaborator receiving accepted invoices"""

    def save(self, record: InvoiceRecord, raw_text: str) -> None:
        ...


class InvoiceExtractor:
    """
    Runs one invoice through the pipeline:
    PDF bytes -> text -> prompt -> model reply -> candidate -> validated record.

    Every failure surfaces as an ``InvoiceExtractionError`` subclass. The
    generation service is called at most once per document and never retried.
    """

    def __init__(self,
                 service: Union[GenerationService, ServiceHandle, None] = None,
                 store: Optional[InvoiceStore] = None,
                 text_extractor: Optional[TextExtractor] = None,
                 recoverer: Optional[ResponseRecoverer] = None,
                 validator: Optional[SchemaValidator] = None):
        if isinstance(service, ServiceHandle):
            self.service_handle = service
        elif service is not None:
            self.service_handle = ServiceHandle(service=service)
        else:
            self.service_handle = ServiceHandle()
        self.store = store
        self.text_extractor = text_extractor or TextExtractor()
        self.recoverer = recoverer or ResponseRecoverer()
        self.validator = validator or SchemaValidator()

    def structure(self, raw_text: str) -> InvoiceRecord:
        """
        Turn extracted invoice text into a validated record

        Args:
            raw_text: Full text of the document

        Returns:
            The validated invoice

        Raises:
            ConfigurationError: the generation service has no credentials
            CredentialError, QuotaExceededError, ServiceUnavailableError:
                the generation service call failed
            ResponseFormatError: no JSON object in the reply
            SchemaValidationError: the JSON object breaks the invoice schema
            ProcessingError: any other failure
        """
        service = self.service_handle.get()
        prompt = build_extraction_prompt(raw_text)

        logger.info("Sending request to generation service...")
        try:
            reply = service.generate(prompt)
        except Exception as e:
            logger.error("Generation service error: %s", e)
            raise classify_service_failure(e) from e
        logger.info("Received response from generation service")

        try:
            candidate = self.recoverer.recover(reply)
        except ResponseFormatError as e:
            excerpt = reply[:config.REPLY_LOG_LIMIT] if isinstance(reply, str) else repr(reply)
            logger.warning("Failed to parse generation service reply (%s): %r", e.detail, excerpt)
            raise

        record = self.validator.validate(candidate)
        logger.info("Invoice %s from %s validated with %d item(s)",
                    record.invoice_number, record.vendor, len(record.items))
        return record

    def extract(self, pdf_bytes: bytes) -> InvoiceRecord:
        """
        Extract a validated invoice from PDF bytes

        When a store is configured the record and its raw text are handed to
        it once validation has passed. Nothing is stored on failure.
        """
        raw_text = self.text_extractor.extract(pdf_bytes)
        record = self.structure(raw_text)

        if self.store is not None:
            self.store.save(record, raw_text)
            logger.info("Invoice %s handed to store", record.invoice_number)

        return record

    def extract_file(self, pdf_path: Union[str, Path]) -> InvoiceRecord:
        """Read a PDF from disk and extract it; the file is left in place"""
        with open(pdf_path, 'rb') as f:
            pdf_bytes = f.read()
        return self.extract(pdf_bytes)
