"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Awaitable, Callable, Sequence
from datetime import datetime

# Must be set before any app imports that trigger Settings validation.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

from models.base import Base  # noqa: E402
from models.element import Element, ElementSite  # noqa: E402
from models.entry import Entry  # noqa: E402
from models.field import ENTRIES_FIELD_TYPE, MANY_TO_MANY_FIELD_TYPE, Field  # noqa: E402
from models.section import Section  # noqa: E402
from models.site import Site  # noqa: E402

EntryFactory = Callable[..., Awaitable[Entry]]


@pytest.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine]:
    """
    Create a fresh in-memory SQLite engine per test.

    StaticPool keeps the single in-memory database alive across connections,
    and a new engine per test gives full isolation without savepoints.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create an async session on the test engine."""
    session_factory = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
async def site(db_session: AsyncSession) -> Site:
    """Create the primary site."""
    site = Site(handle="en", name="English", primary=True)
    db_session.add(site)
    await db_session.flush()
    return site


@pytest.fixture
async def other_site(db_session: AsyncSession) -> Site:
    """Create a secondary site."""
    site = Site(handle="fr", name="French")
    db_session.add(site)
    await db_session.flush()
    return site


@pytest.fixture
async def books_section(db_session: AsyncSession) -> Section:
    """Section whose entries own the relation field (the source side)."""
    section = Section(handle="books", name="Books")
    db_session.add(section)
    await db_session.flush()
    return section


@pytest.fixture
async def articles_section(db_session: AsyncSession) -> Section:
    """A second section whose entries can also use the relation field."""
    section = Section(handle="articles", name="Articles")
    db_session.add(section)
    await db_session.flush()
    return section


@pytest.fixture
async def authors_section(db_session: AsyncSession) -> Section:
    """Section whose entries are selected in the relation field (the target side)."""
    section = Section(handle="authors", name="Authors")
    db_session.add(section)
    await db_session.flush()
    return section


@pytest.fixture
async def authors_field(db_session: AsyncSession) -> Field:
    """Single relation field on books pointing at authors."""
    field = Field(handle="authors", name="Authors", type=ENTRIES_FIELD_TYPE, settings={})
    db_session.add(field)
    await db_session.flush()
    return field


@pytest.fixture
async def editors_field(db_session: AsyncSession) -> Field:
    """Another relation field, used to check relations are scoped per field."""
    field = Field(handle="editors", name="Editors", type=ENTRIES_FIELD_TYPE, settings={})
    db_session.add(field)
    await db_session.flush()
    return field


@pytest.fixture
async def books_field(
    db_session: AsyncSession,
    books_section: Section,
    authors_field: Field,
) -> Field:
    """Many-to-many field on authors showing the books that list the author."""
    field = Field(
        handle="books",
        name="Books",
        type=MANY_TO_MANY_FIELD_TYPE,
        settings={"source": books_section.uid, "singleField": authors_field.uid},
    )
    db_session.add(field)
    await db_session.flush()
    return field


@pytest.fixture
def make_entry(db_session: AsyncSession, site: Site) -> EntryFactory:
    """
    Factory for entries with per-site content.

    Usage:
        book = await make_entry(books_section, "Dune")
        draft = await make_entry(authors_section, "Draft", canonical=author)
    """

    async def _make_entry(
        section: Section,
        title: str,
        *,
        sites: Sequence[Site] | None = None,
        enabled: bool = True,
        site_enabled: bool = True,
        post_date: datetime | None = None,
        canonical: Entry | None = None,
        element_id: int | None = None,
    ) -> Entry:
        element = Element(
            id=element_id,
            type="entry",
            enabled=enabled,
            canonical_id=canonical.id if canonical is not None else None,
        )
        db_session.add(element)
        await db_session.flush()

        for entry_site in sites or [site]:
            db_session.add(ElementSite(
                element_id=element.id,
                site_id=entry_site.id,
                title=title,
                slug=title.lower().replace(" ", "-"),
                enabled=site_enabled,
            ))

        entry = Entry(id=element.id, section_id=section.id, post_date=post_date)
        db_session.add(entry)
        await db_session.flush()
        await db_session.refresh(entry)
        return entry

    return _make_entry


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """Create a test client with database session override and no element cache."""
    from api.dependencies import get_current_element_cache
    from api.main import app
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[get_current_element_cache] = lambda: None

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()
