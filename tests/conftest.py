"""
测试公共夹具：内存SQLite数据库、ASGI客户端、用户与token
"""
import itertools
import os

os.environ["DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"

import httpx
import pytest

from app.db.database import create_engine_for, create_session_factory, create_tables, get_db
from app.models.user import ROLE_ADMIN, ROLE_AUTHOR, ROLE_VIEWER
from app.services.auth_service import AuthService
from app.utils.cache import cache
from main import app

PASSWORD = "password123"


@pytest.fixture
async def engine():
    test_engine = create_engine_for("sqlite+aiosqlite://")
    await create_tables(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    """创建用户并签发token，返回 (用户, 请求头)"""
    counter = itertools.count(1)

    async def _make_user(role: str = ROLE_VIEWER, email: str = None, fname: str = "Test", lname: str = "User"):
        async with session_factory() as session:
            user = await AuthService.create_user(
                session,
                fname=fname,
                lname=lname,
                email=email or f"{role.lower()}{next(counter)}@example.com",
                password=PASSWORD,
                role=role
            )
            token, _ = await AuthService.issue_token(session, user)
        return user, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
async def admin(make_user):
    return await make_user(ROLE_ADMIN, fname="Ada", lname="Admin")


@pytest.fixture
async def author(make_user):
    return await make_user(ROLE_AUTHOR, fname="Wanjiru", lname="Writer")


@pytest.fixture
async def viewer(make_user):
    return await make_user(ROLE_VIEWER, fname="Vic", lname="Viewer")
