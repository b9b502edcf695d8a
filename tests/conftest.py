"""Shared test fixtures for the invoice extractor test suite."""

import copy
import json
from typing import Any, Dict, List, Optional

import pytest

VALID_CANDIDATE: Dict[str, Any] = {
    "invoiceNumber": "INV-1",
    "vendor": "Acme",
    "date": "2024-01-01",
    "total": 30,
    "items": [{"name": "Widget", "quantity": 3, "price": 10}],
}

SAMPLE_TEXT = """ACME SUPPLIES LTD
Invoice No: INV-1
Date: 01/01/2024

Widget    3 x $10.00    $30.00

TOTAL DUE: $30.00"""


class FakeService:
    """Generation service double that records prompts."""

    def __init__(self, reply: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def valid_candidate() -> Dict[str, Any]:
    """A fresh copy of a record that satisfies every schema rule."""
    return copy.deepcopy(VALID_CANDIDATE)


@pytest.fixture
def valid_reply(valid_candidate: Dict[str, Any]) -> str:
    return json.dumps(valid_candidate)


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_TEXT


@pytest.fixture
def fake_service(valid_reply: str) -> FakeService:
    return FakeService(reply=valid_reply)


@pytest.fixture
def make_service():
    """Factory for generation service doubles with a chosen reply or error."""
    return FakeService
