"""Shared fixtures: a fresh SQLite database seeded with two readers and their books."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite://"

from app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from app.domain.entities import Book, UserProfile  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)
from app.infrastructure.realtime import ChangeEventPublisher, ChangeFeed  # noqa: E402
from app.infrastructure.repositories import BookRepository, UserRepository  # noqa: E402

ALICE = "user-alice"
BOB = "user-bob"
CAROL = "user-carol"
BOOK_1984 = "book-1984"
BOOK_DUNE = "book-dune"
BOOK_LENT = "book-lent"


@dataclass
class RecordingPublisher:
    """Publisher double keeping every dispatched change event."""

    events: list

    def dispatch(self, event) -> None:
        self.events.append(event)

    def dispatch_many(self, events) -> None:
        for event in events:
            self.dispatch(event)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'exchange.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def seeded(session_factory):
    """Alice owns "1984" and a book already lent out; Bob owns "Dune"."""

    with session_factory() as session:
        users = UserRepository(session)
        users.create(UserProfile(id=ALICE, display_name="Alice", email="alice@example.com"))
        users.create(UserProfile(id=BOB, display_name="Bob", email="bob@example.com"))
        users.create(UserProfile(id=CAROL, display_name="Carol"))

        books = BookRepository(session)
        books.create(Book(id=BOOK_1984, owner_id=ALICE, title="1984", author="George Orwell"))
        books.create(Book(id=BOOK_DUNE, owner_id=BOB, title="Dune", author="Frank Herbert"))
        books.create(
            Book(
                id=BOOK_LENT,
                owner_id=ALICE,
                title="Brave New World",
                author="Aldous Huxley",
                available=False,
            )
        )
    return session_factory


@pytest.fixture
def session(seeded):
    with seeded() as session:
        yield session


@pytest.fixture
def recorder() -> RecordingPublisher:
    return RecordingPublisher(events=[])


@pytest.fixture
def feed() -> ChangeFeed:
    return ChangeFeed()


@pytest.fixture
def publisher(feed) -> ChangeEventPublisher:
    return ChangeEventPublisher(feed)
