"""JSON file store for accepted invoices"""
import json
import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Union

from .models import InvoiceRecord

logger = logging.getLogger(__name__)


class JsonDirectoryStore:
    """Writes one JSON document per accepted invoice into a directory"""

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def save(self, record: InvoiceRecord, raw_text: str) -> Path:
        document = self.to_document(record, raw_text)
        # Invoice numbers are free text; keep them readable but filesystem safe
        safe_number = re.sub(r"[^A-Za-z0-9._-]+", "_", record.invoice_number).strip("._") or "invoice"
        path = self.output_dir / f"{safe_number}_{uuid.uuid4().hex[:8]}.json"

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)

        logger.info("Invoice saved to %s", path)
        return path

    @staticmethod
    def to_document(record: InvoiceRecord, raw_text: str) -> Dict:
        """Stored shape: the record fields plus the audit text and a timestamp"""
        document = record.to_dict()
        document["rawText"] = raw_text
        document["createdAt"] = datetime.now(timezone.utc).isoformat()
        return document
