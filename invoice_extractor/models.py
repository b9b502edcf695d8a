"""Validated invoice record types"""
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class LineItem:
    """One invoice line; values are kept exactly as the model returned them"""
    name: str
    quantity: Any
    price: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "quantity": self.quantity, "price": self.price}


@dataclass(frozen=True)
class InvoiceRecord:
    """
    An invoice that passed every schema rule.

    Only ``SchemaValidator`` builds these. ``date`` stays the string the model
    produced; turning it into a date value is left to the persistence layer.
    """
    invoice_number: str
    vendor: str
    date: Any
    total: Any
    items: List[LineItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Camel-case JSON shape, identical to the schema the model is asked for"""
        return {
            "invoiceNumber": self.invoice_number,
            "vendor": self.vendor,
            "date": self.date,
            "total": self.total,
            "items": [item.to_dict() for item in self.items],
        }
