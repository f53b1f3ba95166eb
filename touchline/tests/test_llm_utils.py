"""Tests for parse_llm_json."""

import pytest
from touchline.common.llm_utils import parse_llm_json


class TestParseLLMJson:
    def test_plain_object(self):
        assert parse_llm_json('{"intent": "history"}') == {"intent": "history"}

    def test_fenced_object(self):
        raw = '```json\n{"intent": "tactics", "team": "Blueport"}\n```'
        assert parse_llm_json(raw) == {"intent": "tactics", "team": "Blueport"}

    def test_surrounding_whitespace(self):
        assert parse_llm_json('\n  {"a": 1}  \n') == {"a": 1}

    def test_empty_raises(self):
        with pytest.raises(ValueError, match="Empty"):
            parse_llm_json("   ")

    def test_none_raises(self):
        with pytest.raises(ValueError):
            parse_llm_json(None)

    def test_preamble_is_rejected(self):
        with pytest.raises(ValueError, match="Malformed"):
            parse_llm_json('Sure! {"intent": "history"}')

    def test_array_is_rejected(self):
        with pytest.raises(ValueError, match="JSON object"):
            parse_llm_json('["history"]')
