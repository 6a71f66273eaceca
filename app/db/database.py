"""
数据库连接和会话管理
"""
from sqlalchemy import BigInteger, Integer, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import StaticPool
from app.core.config import settings

# 主键/外键类型：SQLite 只对 INTEGER PRIMARY KEY 自增
BigIntId = BigInteger().with_variant(Integer, "sqlite")


def _engine_options(url: str) -> dict:
    """根据数据库类型生成引擎参数"""
    if url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {
        "pool_pre_ping": True,
        "pool_size": 10,
        "max_overflow": 20,
    }


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """
    SQLite 默认不校验外键，开启后级联删除才会生效
    """
    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """创建异步引擎"""
    async_engine = create_async_engine(url, echo=echo, **_engine_options(url))
    if url.startswith("sqlite"):
        enable_sqlite_foreign_keys(async_engine)
    return async_engine


def create_session_factory(async_engine: AsyncEngine) -> async_sessionmaker:
    """创建会话工厂"""
    return async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


# 创建异步引擎
engine = create_engine_for(settings.DATABASE_URL, echo=settings.DEBUG)

# 创建会话工厂
AsyncSessionLocal = create_session_factory(engine)

# 创建Base类
Base = declarative_base()


async def get_db() -> AsyncSession:
    """
    获取数据库会话依赖
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables(async_engine: AsyncEngine = None) -> None:
    """按模型创建全部数据表（开发环境/测试使用）"""
    import app.models  # noqa: F401  注册全部模型

    async with (async_engine or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
