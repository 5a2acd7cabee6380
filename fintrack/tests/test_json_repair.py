import pytest

from fintrack.domains.ai.json_repair import ParseFailure, ParseSuccess, extract_object, parse_model_json, strip_fences

pytestmark = pytest.mark.unit


def test_plain_json_parses_strictly():
    result = parse_model_json('{"category": "Food", "confidence": 0.9}')
    assert isinstance(result, ParseSuccess)
    assert result.ok is True
    assert result.stage == "strict"
    assert result.data == {"category": "Food", "confidence": 0.9}


def test_fenced_json_with_prose():
    text = 'Here you go:\n```json\n{"insights": [{"title": "Save"}]}\n```\nHope that helps!'
    result = parse_model_json(text)
    assert result.ok
    assert result.data == {"insights": [{"title": "Save"}]}


def test_trailing_commas_repaired():
    result = parse_model_json('{"a": [1, 2,], "b": {"c": 3,},}')
    assert result.ok
    assert result.stage == "trailing_commas"
    assert result.data == {"a": [1, 2], "b": {"c": 3}}


def test_aggressive_repair_drops_footnote_fragments():
    result = parse_model_json('{"a": 1, "note": "x" "* footnote"}')
    assert result.ok
    assert result.stage == "aggressive"
    assert result.data == {"a": 1, "note": "x"}


@pytest.mark.parametrize("text", [None, "", "   \n"])
def test_empty_output_is_a_failure(text):
    result = parse_model_json(text)
    assert isinstance(result, ParseFailure)
    assert result.reason == "empty"
    assert result.ok is False


def test_unrepairable_output_reports_snippet():
    result = parse_model_json("I cannot answer that in JSON, sorry.")
    assert isinstance(result, ParseFailure)
    assert result.reason == "invalid_json"
    assert result.snippet.startswith("I cannot answer")


def test_top_level_array_is_not_an_object():
    result = parse_model_json("[1, 2, 3]")
    assert isinstance(result, ParseFailure)


def test_helpers():
    assert strip_fences("```json\n{}\n```") == "{}"
    assert extract_object('prefix {"a": {"b": 1}} suffix') == '{"a": {"b": 1}}'
    assert extract_object("no braces") == "no braces"
