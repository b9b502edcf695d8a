"""Validation of candidate records against the invoice schema"""
import logging
import math
from typing import Any, Dict, List

from .errors import SchemaValidationError
from .models import InvoiceRecord, LineItem

logger = logging.getLogger(__name__)


def _is_present(value: Any) -> bool:
    # Empty strings count as missing, like a blank field on the invoice
    return value is not None and value != ""


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # Arbitrarily large JSON integers are exact; only floats can be NaN or inf
    return isinstance(value, int) or math.isfinite(value)


class SchemaValidator:
    """Checks candidate records and builds InvoiceRecord objects"""

    def check(self, candidate: Any) -> List[str]:
        """
        Collect every schema violation of a candidate record

        Args:
            candidate: Parsed model output

        Returns:
            Human-readable violations in field order; empty when the record is valid
        """
        if not isinstance(candidate, dict):
            return ["Invalid record (should be object)"]

        errors = []
        self._check_string(candidate, "invoiceNumber", errors)
        self._check_string(candidate, "vendor", errors)

        if not _is_present(candidate.get("date")):
            errors.append("Missing date")

        self._check_amount(candidate, "total", errors)

        items = candidate.get("items")
        if items is None:
            errors.append("Missing items")
        elif not isinstance(items, list):
            errors.append("Invalid items (should be array)")
        elif not items:
            errors.append("Empty items (should contain at least one line item)")
        else:
            for position, item in enumerate(items, start=1):
                errors.extend(self._check_item(item, position))

        return errors

    def validate(self, candidate: Any) -> InvoiceRecord:
        """
        Validate a candidate record

        Raises:
            SchemaValidationError: carrying the full list of violations
        """
        violations = self.check(candidate)
        if violations:
            logger.warning("Invoice data validation failed: %s", "; ".join(violations))
            raise SchemaValidationError(violations)

        logger.debug("Invoice data validation passed")
        return InvoiceRecord(
            invoice_number=candidate["invoiceNumber"],
            vendor=candidate["vendor"],
            date=candidate["date"],
            total=candidate["total"],
            items=[
                LineItem(name=item["name"], quantity=item["quantity"], price=item["price"])
                for item in candidate["items"]
            ],
        )

    def _check_item(self, item: Any, position: int) -> List[str]:
        prefix = f"Item {position}: "
        if not isinstance(item, dict):
            return [prefix + "Invalid item (should be object)"]

        errors = []
        self._check_string(item, "name", errors)
        self._check_amount(item, "quantity", errors)
        self._check_amount(item, "price", errors)
        return [prefix + error for error in errors]

    @staticmethod
    def _check_string(record: Dict, key: str, errors: List[str]) -> None:
        value = record.get(key)
        if not _is_present(value):
            errors.append(f"Missing {key}")
        elif not isinstance(value, str):
            errors.append(f"Invalid {key} (should be string)")

    @staticmethod
    def _check_amount(record: Dict, key: str, errors: List[str]) -> None:
        """Non-negative number check shared by total, quantity and price"""
        value = record.get(key)
        if value is None:
            errors.append(f"Missing {key}")
        elif not _is_number(value):
            errors.append(f"Invalid {key} (should be number)")
        elif value < 0:
            errors.append(f"Invalid {key} (cannot be negative)")
