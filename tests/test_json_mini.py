import pytest

from gamenet.json_mini import get_int, get_str, set_int, set_str


def test_set_str_on_empty_document():
    assert set_str("", "name", "bob") == '{"name":"bob"}'


def test_build_document_with_several_fields():
    doc = set_str("", "name", "bob")
    doc = set_int(doc, "score", 42)
    assert doc == '{"name":"bob","score":42}'


def test_round_trip_string_and_int():
    doc = set_int(set_str("", "player", "alice"), "level", -7)
    assert get_str(doc, "player") == "alice"
    assert get_int(doc, "level") == -7


def test_result_is_closed_by_brace():
    doc = set_int(set_int("", "a", 1), "b", 2)
    assert doc.startswith("{") and doc.endswith("}")
    assert doc.count("}") == 1


def test_maxlen_truncates_output():
    doc = set_str("", "name", "bob", maxlen=8)
    assert len(doc) == 7
    assert set_str("", "name", "bob").startswith(doc)


def test_maxlen_without_room_raises():
    with pytest.raises(ValueError):
        set_int("{\"a\":1}", "b", 2, maxlen=3)


def test_get_str_missing_key_raises():
    with pytest.raises(KeyError):
        get_str('{"a":"x"}', "b")


def test_get_str_unterminated_raises():
    with pytest.raises(ValueError):
        get_str('{"a":"xyz', "a")


def test_get_str_maxlen_truncates():
    doc = set_str("", "msg", "abcdef")
    assert get_str(doc, "msg", maxlen=4) == "abc"


def test_get_int_missing_key_raises():
    with pytest.raises(KeyError):
        get_int('{"a":1}', "b")


def test_get_int_non_numeric_is_zero():
    doc = set_str("", "name", "bob")
    assert get_int(doc, "name") == 0


def test_get_int_skips_leading_whitespace():
    assert get_int('{"n": 15}', "n") == 15