"""
测试进程内缓存
"""
import pytest

from app.utils.cache import TTLCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr("cachelib.simple.time", fake)
    return fake


async def test_entries_expire_after_ttl(clock):
    """条目在过期后视为不存在"""
    cache = TTLCache(default_ttl=60)

    cache.set("posts:list", [1, 2, 3])
    clock.now += 59
    assert cache.get("posts:list") == [1, 2, 3]

    clock.now += 2
    assert cache.get("posts:list") is None
    assert cache.get("posts:list", 0) == 0


async def test_non_positive_ttl_never_expires(clock):
    cache = TTLCache()

    cache.set("forever", "value", ttl=0)
    cache.set("negative", "value", ttl=-5)
    clock.now += 10 ** 9
    assert cache.get("forever") == "value"
    assert cache.get("negative") == "value"


async def test_remember_loads_once():
    """命中缓存时不再调用loader"""
    cache = TTLCache()
    calls = []

    async def loader():
        calls.append(1)
        return {"total": len(calls)}

    first = await cache.remember("categories:all", 300, loader)
    second = await cache.remember("categories:all", 300, loader)

    assert first == second == {"total": 1}
    assert len(calls) == 1


async def test_remember_caches_empty_results():
    cache = TTLCache()
    calls = []

    async def loader():
        calls.append(1)
        return []

    assert await cache.remember("posts:list:1", 300, loader) == []
    assert await cache.remember("posts:list:1", 300, loader) == []
    assert len(calls) == 1


async def test_forget_prefix_only_removes_matching_keys():
    cache = TTLCache()
    cache.set("posts:list:1", "a")
    cache.set("posts:list:2", "b")
    cache.set("categories:all", "c")

    assert cache.forget_prefix("posts:") == 2
    assert cache.get("posts:list:1") is None
    assert cache.get("categories:all") == "c"
    assert cache.forget("categories:all") is True
    assert cache.forget("categories:all") is False
