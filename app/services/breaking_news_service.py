"""
突发新闻服务

数据来源优先级：手动设置 → 缓存 → NewsAPI → NewsData.io → 内置兜底列表
"""
import logging
import re
import httpx
from typing import Dict, List, Optional

from app.core.config import settings
from app.schemas.misc import BreakingNewsSettings
from app.utils.cache import TTLCache, cache as default_cache
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

NEWSAPI_URL = "https://newsapi.org/v2/top-headlines"
NEWSDATA_URL = "https://newsdata.io/api/1/news"

NEWS_CACHE_KEY = "breaking_news"
FALLBACK_CACHE_KEY = "breaking_news_fallback"
SETTINGS_CACHE_KEY = "breaking_news_settings"
REQUEST_COUNT_KEY = "news_api_requests_{date}"

ONE_DAY_SECONDS = 24 * 3600
SETTINGS_TTL_SECONDS = 30 * ONE_DAY_SECONDS

SOURCE_MANUAL = "manual"
SOURCE_CACHE = "cache"
SOURCE_NEWSAPI = "newsapi"
SOURCE_NEWSDATA = "newsdata"
SOURCE_FALLBACK = "fallback"

FALLBACK_HEADLINES = [
    "Regional leaders meet to discuss East African trade corridor",
    "Central banks across the region hold interest rates steady",
    "New rail link expected to cut freight times between major ports",
    "Drought relief efforts expand as rainy season arrives late",
    "Tech hubs report record investment in local startups",
]

_BRACKETED = re.compile(r"\s*\[[^\]]*\]|\s*\([^\)]*\)")
_TRAILING_SOURCE = re.compile(r"\s*[-|]\s*[^-\|]+$")


def clean_headline(text: str) -> str:
    """
    清理标题：去掉括号内的文字以及结尾的 " - 来源" / " | 来源"
    """
    cleaned = _BRACKETED.sub("", text or "")
    cleaned = _TRAILING_SOURCE.sub("", cleaned)
    return cleaned.strip()


class BreakingNewsService:
    """突发新闻服务类"""

    def __init__(self, cache: Optional[TTLCache] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.cache = cache if cache is not None else default_cache
        self.transport = transport

    def get_settings(self) -> BreakingNewsSettings:
        stored = self.cache.get(SETTINGS_CACHE_KEY)
        if stored is None:
            return BreakingNewsSettings()
        return BreakingNewsSettings(**stored)

    def update_settings(self, new_settings: BreakingNewsSettings) -> BreakingNewsSettings:
        """保存设置并清除已缓存的新闻，下次请求重新获取"""
        self.cache.set(SETTINGS_CACHE_KEY, new_settings.model_dump(), SETTINGS_TTL_SECONDS)
        self.cache.forget(NEWS_CACHE_KEY)
        logger.info(
            "突发新闻设置已更新: manual=%s manual_count=%s newsapi=%s newsdata=%s",
            new_settings.useManualNews, len(new_settings.manualNews),
            new_settings.useNewsapi, new_settings.useNewsdata
        )
        return new_settings

    def _request_count_key(self) -> str:
        return REQUEST_COUNT_KEY.format(date=utcnow().strftime("%Y-%m-%d"))

    def _increment_request_count(self) -> None:
        key = self._request_count_key()
        self.cache.set(key, self.cache.get(key, 0) + 1, ONE_DAY_SECONDS)

    def _cache_news(self, headlines: List[str]) -> None:
        self.cache.set(NEWS_CACHE_KEY, headlines, settings.BREAKING_NEWS_CACHE_SECONDS)
        self.cache.set(FALLBACK_CACHE_KEY, headlines, ONE_DAY_SECONDS)

    async def _fetch(self, url: str, params: Dict[str, str], results_key: str) -> Optional[List[str]]:
        """
        请求新闻接口并提取清理后的标题，失败返回None
        """
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self.transport) as client:
                response = await client.get(url, params=params)
            if response.status_code != 200:
                logger.error("新闻接口调用失败: %s %s", url, response.status_code)
                return None
            articles = response.json().get(results_key)
        except (httpx.HTTPError, ValueError) as e:
            logger.error("新闻接口请求异常: %s %s", url, e)
            return None

        if not isinstance(articles, list):
            return None

        headlines = [
            clean_headline(article["title"])
            for article in articles
            if isinstance(article, dict) and article.get("title")
        ]
        return headlines or None

    async def fetch_from_newsapi(self, api_key: str) -> Optional[List[str]]:
        return await self._fetch(
            NEWSAPI_URL,
            {"language": "en", "pageSize": "5", "q": settings.BREAKING_NEWS_QUERY, "apiKey": api_key},
            "articles"
        )

    async def fetch_from_newsdata(self, api_key: str) -> Optional[List[str]]:
        return await self._fetch(
            NEWSDATA_URL,
            {"language": "en", "category": "top", "q": settings.BREAKING_NEWS_QUERY, "apikey": api_key},
            "results"
        )

    async def get_breaking_news(self) -> Dict:
        """
        获取突发新闻

        Returns:
            {"headlines": [...], "source": 来源, "message": 可选说明}
        """
        news_settings = self.get_settings()

        if news_settings.useManualNews and news_settings.manualNews:
            return {"headlines": news_settings.manualNews, "source": SOURCE_MANUAL}

        cached = self.cache.get(NEWS_CACHE_KEY)
        if cached:
            return {"headlines": cached, "source": SOURCE_CACHE}

        if self.cache.get(self._request_count_key(), 0) >= settings.BREAKING_NEWS_MAX_REQUESTS_PER_DAY:
            logger.warning("突发新闻接口已达到当日请求上限")
            return {
                "headlines": self.cache.get(FALLBACK_CACHE_KEY, FALLBACK_HEADLINES),
                "source": SOURCE_FALLBACK,
                "message": "Daily request limit reached"
            }

        if news_settings.useNewsapi and settings.NEWSAPI_KEY:
            headlines = await self.fetch_from_newsapi(settings.NEWSAPI_KEY)
            if headlines:
                self._increment_request_count()
                self._cache_news(headlines)
                return {"headlines": headlines, "source": SOURCE_NEWSAPI}

        if news_settings.useNewsdata and settings.NEWSDATA_KEY:
            headlines = await self.fetch_from_newsdata(settings.NEWSDATA_KEY)
            if headlines:
                self._cache_news(headlines)
                return {"headlines": headlines, "source": SOURCE_NEWSDATA}

        self._cache_news(FALLBACK_HEADLINES)
        return {"headlines": list(FALLBACK_HEADLINES), "source": SOURCE_FALLBACK}


breaking_news_service = BreakingNewsService()
