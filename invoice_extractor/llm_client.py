"""Generation service clients used to structure invoice text"""
import logging
import threading
from typing import Callable, Optional, Protocol

from google import genai
from openai import OpenAI
import openai

from . import config
from .errors import (
    ConfigurationError,
    CredentialError,
    InvoiceExtractionError,
    ProcessingError,
    QuotaExceededError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a precise invoice extraction assistant. Return only valid JSON."

# Last-resort message fragments, checked only when the failure carries no status code
CREDENTIAL_MARKERS = ("api key", "api_key", "permission", "unauthorized")
QUOTA_MARKERS = ("quota", "rate limit", "resource_exhausted",
                 "status 429", "code 429", "429 too many requests")
NETWORK_MARKERS = ("connection", "timed out", "timeout", "unreachable")


class GenerationService(Protocol):
    """Anything that turns a prompt into a reply string"""

    def generate(self, prompt: str) -> str:
        ...


def classify_service_failure(error: Exception) -> InvoiceExtractionError:
    """
    Map a failure raised by a generation SDK onto the pipeline taxonomy

    Typed information (exception class, HTTP status code) is used first.
    Message inspection is only a fallback for shapes we do not recognize.
    """
    if isinstance(error, InvoiceExtractionError):
        return error

    status = getattr(error, "status_code", None) or getattr(error, "code", None)
    if status in (401, 403):
        return CredentialError()
    if status == 429:
        return QuotaExceededError()
    if isinstance(error, (openai.APIConnectionError, ConnectionError, TimeoutError)):
        return ServiceUnavailableError()

    message = str(error).lower()
    if any(marker in message for marker in CREDENTIAL_MARKERS):
        return CredentialError()
    if any(marker in message for marker in QUOTA_MARKERS):
        return QuotaExceededError()
    if any(marker in message for marker in NETWORK_MARKERS):
        return ServiceUnavailableError()

    return ProcessingError(f"AI processing failed: {error}")


class LLMClient:
    """Client for the OpenAI chat completions API"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or config.OPENAI_API_KEY
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set in environment variables")
        self.client = OpenAI(api_key=api_key)
        self.model = model or config.LLM_MODEL

    def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw reply text"""
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt}
                ],
                response_format={"type": "json_object"}
            )
        except Exception as e:
            logger.error("OpenAI request failed: %s", e)
            raise classify_service_failure(e) from e

        return response.choices[0].message.content or ""


class GeminiClient:
    """Client for the Google Gemini API"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        api_key = api_key or config.GEMINI_API_KEY
        if not api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set in environment variables")
        self.client = genai.Client(api_key=api_key)
        self.model = model or config.GEMINI_MODEL

    def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw reply text"""
        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as e:
            logger.error("Gemini request failed: %s", e)
            raise classify_service_failure(e) from e

        return response.text or ""


def create_service(provider: Optional[str] = None) -> GenerationService:
    """Build the generation service configured by LLM_PROVIDER"""
    provider = (provider or config.LLM_PROVIDER).lower()
    if provider == "openai":
        service = LLMClient()
    elif provider == "gemini":
        service = GeminiClient()
    else:
        raise ConfigurationError(f"Unknown LLM_PROVIDER: {provider}")

    logger.info("Generation service initialized (%s, model %s)", provider, service.model)
    return service


class ServiceHandle:
    """
    Lazily created, shared generation service.

    The factory runs on the first ``get()`` and at most once per handle, even
    when several threads ask at the same time. A failed initialization is not
    cached, so a later call retries it.
    """

    def __init__(self,
                 factory: Callable[[], GenerationService] = create_service,
                 service: Optional[GenerationService] = None):
        self._factory = factory
        self._service = service
        self._lock = threading.Lock()

    @property
    def initialized(self) -> bool:
        return self._service is not None

    def get(self) -> GenerationService:
        if self._service is None:
            with self._lock:
                if self._service is None:
                    self._service = self._factory()
        return self._service
