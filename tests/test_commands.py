import pytest

from app.core.exceptions import UnknownCommandError
from app.flow.commands import CommandWord, parse_command


def test_parse_command_is_case_insensitive():
    command = parse_command("  GROUP John,   Alice ")
    assert command.word == CommandWord.GROUP
    assert command.args == ["John,", "Alice"]
    assert command.text == "John, Alice"


def test_parse_empty_body_is_not_a_command():
    assert parse_command("") is None
    assert parse_command("   \n ") is None
    assert parse_command(None) is None


def test_parse_unknown_word_raises():
    with pytest.raises(UnknownCommandError) as exc_info:
        parse_command("hello there")
    assert exc_info.value.word == "hello"


def test_usage_with_and_without_parameter():
    assert CommandWord.NAME.usage() == 'Reply "name X", where X is your name'
    assert CommandWord.CONTACTS.usage() == 'Reply "contacts"'


def test_hint_appends_description_and_example():
    assert CommandWord.STOP.hint() == (
        'Reply "stop", to stop receiving messages and remove yourself from the database.'
    )
    assert CommandWord.CONFIRM.hint() == (
        'Reply "confirm X", where X is number(s) from a list of pending actions, '
        'to confirm pending action(s).\nExample: "confirm 2,3"'
    )


def test_lookup():
    assert CommandWord.lookup("Info") == CommandWord.INFO
    assert CommandWord.lookup("help") is None


def test_every_command_is_documented():
    for word in CommandWord:
        assert word.description
        assert word.hint().startswith(f'Reply "{word}')
