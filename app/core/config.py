"""
应用配置文件
"""
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """应用配置"""

    # 应用基本配置
    APP_NAME: str = "Newsroom CMS"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # 数据库配置
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "newsroom"
    DATABASE_URI: Optional[str] = None  # 完整连接串，设置后覆盖上面的分项配置
    AUTO_CREATE_TABLES: bool = False

    # JWT配置
    SECRET_KEY: str = "your-secret-key-change-in-production"
    ALGORITHM: str = "HS256"

    # Token有效期（分钟）
    TOKEN_MAX_LIFETIME_MINUTES: int = 60 * 24 * 7  # 7天
    TOKEN_MAX_IDLE_MINUTES: int = 60 * 24 * 2  # 2天

    # CORS配置
    CORS_ORIGINS: list = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
    ]

    # 缓存时长（秒）
    POSTS_CACHE_SECONDS: int = 300
    CATEGORIES_CACHE_SECONDS: int = 1800
    BREAKING_NEWS_CACHE_SECONDS: int = 3600

    # 评论配置
    COMMENT_DEFAULT_STATUS: str = "pending"

    # AI建议（OpenAI兼容接口）
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_BASE: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-3.5-turbo"
    OPENAI_TIMEOUT_SECONDS: float = 60.0

    # 突发新闻数据源
    NEWSAPI_KEY: Optional[str] = None
    NEWSDATA_KEY: Optional[str] = None
    BREAKING_NEWS_MAX_REQUESTS_PER_DAY: int = 100
    BREAKING_NEWS_QUERY: str = (
        "east africa OR kenya OR uganda OR tanzania OR ethiopia OR rwanda "
        "OR burundi OR south sudan OR somalia OR eritrea OR djibouti"
    )

    # 上传存储配置
    UPLOAD_DIR: str = "storage/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    PUBLIC_BASE_URL: str = "http://localhost:8000"
    UPLOAD_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB

    @property
    def DATABASE_URL(self) -> str:
        """获取数据库连接URL"""
        if self.DATABASE_URI:
            return self.DATABASE_URI
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    class Config:
        case_sensitive = True
        env_file = ".env"


settings = Settings()
