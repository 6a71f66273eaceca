"""
进程内缓存

基于 cachelib.SimpleCache，只用于降低重复查询的开销，数据以数据库为准；写操作后按前缀清除即可。
"""
from typing import Any, Awaitable, Callable, Optional, Set
from cachelib import SimpleCache


class TTLCache:
    """
    带过期时间与前缀清除的内存缓存

    ttl <= 0 表示永不过期
    """

    def __init__(self, default_ttl: int = 300, threshold: int = 1000):
        self.default_ttl = default_ttl
        self._backend = SimpleCache(threshold=threshold, default_timeout=default_ttl)
        # 已写入的键，用于按前缀清除
        self._keys: Set[str] = set()

    def get(self, key: str, default: Any = None) -> Any:
        """读取缓存，过期的条目视为不存在"""
        if not self._backend.has(key):
            self._keys.discard(key)
            return default
        return self._backend.get(key)

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        ttl = self.default_ttl if ttl is None else max(ttl, 0)
        self._backend.set(key, value, timeout=ttl)
        self._keys.add(key)

    async def remember(self, key: str, ttl: Optional[int], loader: Callable[[], Awaitable[Any]]) -> Any:
        """
        命中则直接返回，否则调用loader加载并写入缓存
        """
        if self._backend.has(key):
            return self._backend.get(key)

        value = await loader()
        self.set(key, value, ttl)
        return value

    def forget(self, key: str) -> bool:
        self._keys.discard(key)
        return self._backend.delete(key)

    def forget_prefix(self, prefix: str) -> int:
        """删除指定前缀的所有条目，返回删除数量"""
        keys = [key for key in self._keys if key.startswith(prefix)]
        return sum(1 for key in keys if self.forget(key))

    def clear(self) -> None:
        self._backend.clear()
        self._keys.clear()


# 全局缓存实例
cache = TTLCache()

# 缓存键前缀
POSTS_CACHE_PREFIX = "posts:"
CATEGORIES_CACHE_PREFIX = "categories:"


def invalidate_content_cache() -> None:
    """文章/分类/作者发生变化后清除列表缓存"""
    cache.forget_prefix(POSTS_CACHE_PREFIX)
    cache.forget_prefix(CATEGORIES_CACHE_PREFIX)
