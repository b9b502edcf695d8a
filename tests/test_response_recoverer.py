"""Tests for recovering JSON payloads from model replies."""

import json

import pytest

from invoice_extractor.errors import ResponseFormatError
from invoice_extractor.response_recoverer import ResponseRecoverer


@pytest.fixture
def recoverer() -> ResponseRecoverer:
    return ResponseRecoverer()


class TestStripFences:
    def test_removes_fences_with_language_tag(self, recoverer: ResponseRecoverer) -> None:
        assert recoverer.strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_fences_anywhere(self, recoverer: ResponseRecoverer) -> None:
        text = 'Step one:\n```\nnothing\n```\nResult:\n```JSON\n{"a": 1}\n```'
        assert "```" not in recoverer.strip_fences(text)

    def test_no_fences_is_noop(self, recoverer: ResponseRecoverer) -> None:
        assert recoverer.strip_fences('  {"a": 1}  ') == '{"a": 1}'


class TestRecover:
    def test_plain_json_matches_direct_parse(self, recoverer: ResponseRecoverer, valid_reply: str) -> None:
        assert recoverer.recover(valid_reply) == json.loads(valid_reply)

    def test_fenced_block_with_surrounding_prose(self, recoverer: ResponseRecoverer, valid_candidate) -> None:
        reply = (
            "Here is the extracted invoice data:\n"
            f"```json\n{json.dumps(valid_candidate)}\n```\n"
            "Let me know if you need anything else."
        )
        assert recoverer.recover(reply) == valid_candidate

    def test_prose_without_fences(self, recoverer: ResponseRecoverer) -> None:
        assert recoverer.recover('Sure! {"total": 5} Hope that helps.') == {"total": 5}

    def test_nested_objects_survive_bracket_scan(self, recoverer: ResponseRecoverer) -> None:
        reply = 'Result: {"items": [{"name": "A"}], "meta": {"x": 1}} done'
        assert recoverer.recover(reply) == {"items": [{"name": "A"}], "meta": {"x": 1}}

    def test_strict_parse_keeps_braces_inside_strings(self, recoverer: ResponseRecoverer) -> None:
        reply = '{"vendor": "Curly } Braces {Inc}", "total": 1}'
        assert recoverer.recover(reply)["vendor"] == "Curly } Braces {Inc}"

    @pytest.mark.parametrize("reply", [
        "",
        "   ",
        "I could not find an invoice in this text.",
        "{ unbalanced",
        "unbalanced }",
        "} backwards {",
        "```json\n```",
    ])
    def test_no_object_raises_format_error(self, recoverer: ResponseRecoverer, reply: str) -> None:
        with pytest.raises(ResponseFormatError):
            recoverer.recover(reply)

    def test_invalid_json_carries_parser_detail(self, recoverer: ResponseRecoverer) -> None:
        with pytest.raises(ResponseFormatError) as exc_info:
            recoverer.recover('Data: {"total": 12,}')
        assert exc_info.value.detail
        assert exc_info.value.detail in exc_info.value.message

    def test_top_level_array_rejected(self, recoverer: ResponseRecoverer) -> None:
        with pytest.raises(ResponseFormatError):
            recoverer.recover('[1, 2, 3]')

    def test_non_string_reply_rejected(self, recoverer: ResponseRecoverer) -> None:
        with pytest.raises(ResponseFormatError):
            recoverer.recover(None)


class TestDeeplyNestedReplies:
    def test_deep_nesting_inside_braces(self, recoverer: ResponseRecoverer) -> None:
        reply = "{" + '"a":' + "[" * 100000 + "}"
        with pytest.raises(ResponseFormatError) as exc_info:
            recoverer.recover(reply)
        assert exc_info.value.detail

    def test_deep_nesting_without_braces(self, recoverer: ResponseRecoverer) -> None:
        with pytest.raises(ResponseFormatError):
            recoverer.recover("[" * 100000)

    def test_deep_nesting_behind_prose(self, recoverer: ResponseRecoverer) -> None:
        reply = "Here you go: " + '{"a": ' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(ResponseFormatError):
            recoverer.recover(reply)
