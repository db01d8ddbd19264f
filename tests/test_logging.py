import asyncio
import json
import logging

from app.core.logging import DevelopmentFormatter, LogContext, StructuredFormatter, get_logger

from conftest import ALICE, BOB

logger = get_logger("tests")


def make_record(message="hello"):
    return logger.makeRecord(logger.name, logging.INFO, __file__, 1, message, None, None)


def test_nested_context_extends_and_restores(caplog):
    with caplog.at_level(logging.INFO, logger="grouptext"):
        with LogContext(sender=ALICE):
            with LogContext(command="group"):
                logger.info("inner")
            logger.info("outer")
        logger.info("after")

    inner, outer, after = caplog.records
    assert (inner.sender, inner.command) == (ALICE, "group")
    assert outer.sender == ALICE
    assert not hasattr(outer, "command")
    assert not hasattr(after, "sender")


async def test_concurrent_messages_keep_their_own_sender(caplog):
    async def handle(sender):
        with LogContext(sender=sender):
            await asyncio.sleep(0.01)
            logger.info(sender)

    with caplog.at_level(logging.INFO, logger="grouptext"):
        await asyncio.gather(handle(ALICE), handle(BOB))

    assert {record.getMessage(): record.sender for record in caplog.records} == {ALICE: ALICE, BOB: BOB}


def test_development_format_appends_context_labels():
    with LogContext(sender=ALICE, action_type="group"):
        line = DevelopmentFormatter().format(make_record())

    assert "grouptext.tests: hello" in line
    assert line.endswith(f"[sender={ALICE}, action=group]")


def test_structured_format_is_one_json_object():
    with LogContext(sender=ALICE, command="delete"):
        data = json.loads(StructuredFormatter().format(make_record("bye")))

    assert data["message"] == "bye"
    assert data["level"] == "INFO"
    assert data["sender"] == ALICE
    assert data["command"] == "delete"
    assert "action_type" not in data
