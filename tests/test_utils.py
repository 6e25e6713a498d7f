import pytest

from utils import b64encode_text, parse_json_object, sh_quote, split_lines


def test_sh_quote_wraps_in_single_quotes() -> None:
    assert sh_quote("/data/adb/modules") == "'/data/adb/modules'"
    assert sh_quote("O'Brien") == "'O'\\''Brien'"


@pytest.mark.parametrize(
    "value",
    ["O'Brien", "two  spaces", "$HOME `id` $(id)", "semi; rm -rf x", "", "'", "tab\tand\nnewline"],
)
def test_sh_quote_survives_a_real_shell(shell, value: str) -> None:
    result = shell.run(f"printf '%s' {sh_quote(value)}")
    assert result.success
    assert result.output == value


def test_b64encode_text_uses_utf8() -> None:
    assert b64encode_text("é") == "w6k="
    assert b64encode_text("") == ""


def test_split_lines_drops_only_trailing_newline() -> None:
    assert split_lines("") == []
    assert split_lines("a\nb\n") == ["a", "b"]
    assert split_lines("a\n\nb") == ["a", "", "b"]


def test_parse_json_object_rejects_other_types() -> None:
    assert parse_json_object('{"a": 1}') == {"a": 1}
    assert parse_json_object("[1, 2]") is None
    assert parse_json_object("not json") is None
    assert parse_json_object("   ") is None
