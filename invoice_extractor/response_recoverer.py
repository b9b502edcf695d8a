"""Recovery of the JSON payload embedded in a model reply"""
import json
import logging
import re
from typing import Any, Dict

from .errors import ResponseFormatError

logger = logging.getLogger(__name__)

# Opening (```json, ```JSON, ```) and closing fence markers, anywhere in the text
FENCE_PATTERN = re.compile(r"```[A-Za-z0-9_+-]*")


class ResponseRecoverer:
    """Turns a free-text model reply into a candidate record"""

    def strip_fences(self, text: str) -> str:
        """Remove every Markdown code fence marker and trim"""
        return FENCE_PATTERN.sub("", text.strip()).strip()

    def recover(self, reply: str) -> Dict[str, Any]:
        """
        Locate and parse the JSON object in a model reply

        A strict parse of the fence-stripped text is tried first. If that
        fails, the slice from the first ``{`` to the last ``}`` is parsed
        instead, which copes with prose written around the payload.

        Args:
            reply: Raw text returned by the generation service

        Returns:
            The parsed JSON object (unvalidated)

        Raises:
            ResponseFormatError: no JSON object could be recovered
        """
        if not isinstance(reply, str):
            raise ResponseFormatError("Failed to parse AI response", "reply is not text")

        clean_text = self.strip_fences(reply)

        try:
            parsed = json.loads(clean_text)
        except (ValueError, RecursionError):
            parsed = None

        if not isinstance(parsed, dict):
            parsed = self._parse_braced_slice(clean_text)

        if not isinstance(parsed, dict):
            raise ResponseFormatError("Failed to parse AI response", "JSON payload is not an object")
        return parsed

    def _parse_braced_slice(self, text: str) -> Any:
        start_index = text.find("{")
        end_index = text.rfind("}")

        if start_index == -1 or end_index == -1 or end_index < start_index:
            raise ResponseFormatError("Failed to parse AI response", "No valid JSON found in AI response")

        json_string = text[start_index:end_index + 1]
        try:
            return json.loads(json_string)
        except (ValueError, RecursionError) as e:
            logger.debug("Bracket-scanned payload did not parse: %s", e)
            raise ResponseFormatError("Failed to parse AI response", str(e)) from e
