import pytest

from app.core.exceptions import ValidationError
from utils.phone_utils import area_code, format_contact, normalize_phone_number
from utils.text_utils import format_group, format_member_count, numbered_lines
from utils.validation_utils import parse_deferred_token, parse_index, split_selections, validate_name
from utils.vcard_utils import is_vcard_content_type, parse_vcards

from conftest import vcard


@pytest.mark.parametrize("raw, expected", [
    ("(206) 555-0100", "+12065550100"),
    ("+1 425 555 0111", "+14255550111"),
    ("+44 20 7946 0958", "+442079460958"),
    ("12", None),
    ("not a number", None),
    ("", None),
])
def test_normalize_phone_number(raw, expected):
    assert normalize_phone_number(raw) == expected


def test_area_code_and_contact_format():
    assert area_code("+12065550100") == "206"
    assert area_code("garbage") == "garbage"
    assert format_contact("John Smith", "+12065550123") == "John Smith (206)"


def test_member_counts():
    assert format_member_count(1) == "1 member"
    assert format_member_count(0) == "0 members"
    assert format_group("group0", 2) == "group0 (2 members)"
    assert numbered_lines(["a", "b"], start=3) == ["3. a", "4. b"]


def test_validate_name_trims():
    assert validate_name("  John S.  ", "usage") == "John S."
    with pytest.raises(ValidationError) as exc_info:
        validate_name("   ", "usage")
    assert exc_info.value.message == "usage"


def test_selection_parsing():
    assert split_selections(" 1, 3,4  5 ") == ["1", "3", "4", "5"]
    assert split_selections("") == []
    assert parse_index("12") == 12
    assert parse_index("-1") is None
    assert parse_index("1a") is None
    assert parse_deferred_token("12c") == (12, 2)
    assert parse_deferred_token("a1") is None
    assert parse_deferred_token("1ab") is None


def test_vcard_content_types():
    assert is_vcard_content_type("text/vcard")
    assert is_vcard_content_type("TEXT/X-VCARD; charset=utf-8")
    assert not is_vcard_content_type("image/png")
    assert not is_vcard_content_type(None)


def test_parse_vcards_normalizes_and_dedupes_numbers():
    data = vcard(
        "Bob Lee",
        ("(206) 555-0101", "CELL"),
        ("+1 206 555 0101", "HOME"),
        ("nonsense", "WORK"),
        ("425.555.0102", "WORK,VOICE"),
    )

    [record] = parse_vcards(data)

    assert record.name == "Bob Lee"
    assert [(p.number, p.description) for p in record.phones] == [
        ("+12065550101", "cell"),
        ("+14255550102", "work"),
    ]


def test_parse_vcards_falls_back_to_structured_name():
    data = "BEGIN:VCARD\r\nVERSION:3.0\r\nN:Lee;Bob;;;\r\nTEL:2065550101\r\nEND:VCARD\r\n"

    [record] = parse_vcards(data)

    assert record.name == "Bob Lee"
