import pytest
import pytest_asyncio
from flash_finder import db as db_module
from flash_finder.connection import Connection
from flash_finder.models import Model
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Book, Profile, Publisher, Song, User, Writer, users_songs

DATABASE_URL = "sqlite+aiosqlite:///:memory:"  # in-memory DB for tests


@pytest_asyncio.fixture(scope="function")
async def init_test_db():
    """Initialize the test database and create every table."""
    async_engine = db_module.init_db(DATABASE_URL, echo=False)

    async with async_engine.begin() as conn:
        await conn.run_sync(Model.metadata.create_all)

    yield

    await db_module.close_db()


@pytest_asyncio.fixture()
async def db_session(init_test_db):  # noqa: ARG001
    """Provide a database session for tests."""
    async for session in db_module.get_db():
        yield session


@pytest.fixture
def connection(db_session: AsyncSession) -> Connection:
    """A finder connection over the test session."""
    return Connection(db_session)


@pytest_asyncio.fixture()
async def library(db_session: AsyncSession) -> dict[str, int]:
    """
    Seed a small library and return the ids of the interesting rows.

    alice owns "Emma" (no publisher, one writer) and "Dune" (Penguin, two
    writers), has a profile and two songs. bob owns nothing.
    """
    alice = User(name="alice", email="alice@example.com")
    bob = User(name="bob")
    db_session.add_all([alice, bob])
    await db_session.flush()

    penguin = Publisher(name="Penguin")
    db_session.add(penguin)
    await db_session.flush()

    # Inserted in reverse title order so ordering is observable
    emma = Book(title="Emma", user_id=alice.id)
    dune = Book(title="Dune", user_id=alice.id, publisher_id=penguin.id)
    db_session.add_all([emma, dune])
    await db_session.flush()

    db_session.add_all(
        [
            Writer(name="Frank Herbert", book_id=dune.id),
            Writer(name="Brian Herbert", book_id=dune.id),
            Writer(name="Jane Austen", book_id=emma.id),
            Profile(bio="reader", user_id=alice.id),
        ]
    )
    blues = Song(title="Blues")
    jazz = Song(title="Jazz")
    db_session.add_all([blues, jazz])
    await db_session.flush()

    await db_session.execute(
        users_songs.insert().values(
            [
                {"user_id": alice.id, "song_id": blues.id},
                {"user_id": alice.id, "song_id": jazz.id},
            ]
        )
    )
    await db_session.commit()

    ids = {
        "alice": alice.id,
        "bob": bob.id,
        "penguin": penguin.id,
        "dune": dune.id,
        "emma": emma.id,
    }
    # Finders must build fresh instances rather than reuse seeded ones
    db_session.expunge_all()
    return ids
