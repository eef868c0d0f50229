"""
Shared fixtures

Every test gets a fresh in-memory SQLite database (aiosqlite, one shared
connection) with foreign keys enforced, an httpx client bound to the app,
and an upload directory under tmp_path.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import hc_stock.models  # noqa: E402,F401
from hc_stock.api.main import app  # noqa: E402
from hc_stock.config.settings import settings  # noqa: E402
from hc_stock.database.config import Base, get_db  # noqa: E402
from hc_stock.models import Category, StockInfo, User  # noqa: E402
from hc_stock.services.auth_service import create_access_token, hash_password  # noqa: E402

PASSWORD = "secret123"

# PNG signature followed by filler; only the declared type and extension are checked
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def test_settings(tmp_path, monkeypatch):
    """Cheap bcrypt and a throwaway upload directory"""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    monkeypatch.setattr(settings, "upload_dir", tmp_path / "uploads")
    monkeypatch.setattr(settings, "public_base_url", "http://testserver")
    return settings


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


# ═══════════════════════════════════════════════════════════════════════════════
# Users and tokens
# ═══════════════════════════════════════════════════════════════════════════════


async def create_user(db, username: str, role: str = "user") -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=hash_password(PASSWORD),
        role=role,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"x-auth-token": create_access_token(user.id, user.role)}


@pytest.fixture
async def admin(db):
    return await create_user(db, "admin", role="admin")


@pytest.fixture
async def alice(db):
    return await create_user(db, "alice")


@pytest.fixture
async def bob(db):
    return await create_user(db, "bob")


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def alice_headers(alice):
    return auth_headers(alice)


@pytest.fixture
def bob_headers(bob):
    return auth_headers(bob)


# ═══════════════════════════════════════════════════════════════════════════════
# Content and stock master data
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.fixture
async def category(db):
    category = Category(name="Tin thị trường", slug="tin-thi-truong", description="Tin tức thị trường")
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@pytest.fixture
async def companies(db):
    """VNM, FPT, VIC and VNG in stock_info"""
    rows = [
        StockInfo(symbol="VNM", name="Vinamilk"),
        StockInfo(symbol="FPT", name="FPT Corporation"),
        StockInfo(symbol="VIC", name="Vingroup"),
        StockInfo(symbol="VNG", name="VNG Corporation"),
    ]
    db.add_all(rows)
    await db.commit()
    return {r.symbol: r for r in rows}


@pytest.fixture
def png_upload():
    """(filename, bytes, content type) for httpx `files=`"""
    return ("chart.png", PNG_BYTES, "image/png")
