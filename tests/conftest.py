import pytest
from sqlalchemy import func, select

from app.db.database import connect_to_database, close_database_connection, get_session_factory
from app.db.schema import create_tables
from app.flow.dispatcher import dispatch_message
from app.schemas.webhook import Attachment, InboundMessage
from app.services.contact_service import save_contact

ALICE = "+12065550100"
BOB = "+14255550111"


@pytest.fixture
async def db(tmp_path):
    """Fresh SQLite database per test, wired into the global session factory."""
    await connect_to_database(f"sqlite+aiosqlite:///{tmp_path / 'grouptext.db'}")
    await create_tables()
    yield get_session_factory()
    await close_database_connection()


@pytest.fixture
def sms(db):
    """Sends a text through the dispatcher and returns the reply."""
    async def send(sender, body, attachment=None):
        message = InboundMessage(sender=sender, body=body, attachment=attachment)
        return await dispatch_message(message)
    return send


@pytest.fixture
def count_rows(db):
    """Counts rows of a model, optionally filtered."""
    async def count(model, *where):
        async with db() as session:
            statement = select(func.count()).select_from(model)
            if where:
                statement = statement.where(*where)
            result = await session.execute(statement)
            return result.scalar_one()
    return count


def vcard_attachment():
    return Attachment(count=1, content_type="text/vcard", url="https://media.example.com/card.vcf")


def vcard(name, *phones):
    """Builds a vCard 3.0 text. phones are (number, type) pairs."""
    lines = ["BEGIN:VCARD", "VERSION:3.0", f"FN:{name}"]
    for number, phone_type in phones:
        if phone_type:
            lines.append(f"TEL;TYPE={phone_type}:{number}")
        else:
            lines.append(f"TEL:{number}")
    lines.append("END:VCARD")
    return "\r\n".join(lines) + "\r\n"


@pytest.fixture
def add_contacts(db):
    """Saves (name, number) contacts for an owner in one transaction."""
    async def add(owner, *contacts):
        async with db() as session:
            async with session.begin():
                for name, number in contacts:
                    await save_contact(session, owner, name, number)
    return add
