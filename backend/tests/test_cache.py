"""
계산 캐시 테스트
"""
from sajucal.config import Settings
from sajucal.services.cache import CalculationCache, create_cache


class TestCalculationCache:
    """CalculationCache"""

    def test_make_key_deterministic(self):
        assert CalculationCache.make_key("a", 1, {"x": 1, "y": 2}) == \
            CalculationCache.make_key("a", 1, {"y": 2, "x": 1})
        assert CalculationCache.make_key("a", 1) != CalculationCache.make_key("a", 2)

    def test_get_set(self):
        cache = CalculationCache(maxsize=10)
        assert cache.get("day", "2023-10-02") is None
        cache.set("day", "2023-10-02", value="癸巳")
        assert cache.get("day", "2023-10-02") == "癸巳"
        assert len(cache) == 1

    def test_get_or_compute_once(self):
        cache = CalculationCache(maxsize=10)
        calls = []

        def compute():
            calls.append(1)
            return None

        # None 결과도 캐시
        assert cache.get_or_compute("term", ("2030-01-01",), compute) is None
        assert cache.get_or_compute("term", ("2030-01-01",), compute) is None
        assert len(calls) == 1

    def test_lru_eviction(self):
        cache = CalculationCache(maxsize=2)
        for i in range(3):
            cache.set("k", i, value=i)
        assert len(cache) == 2
        assert cache.get("k", 0) is None

    def test_stats_and_clear(self):
        cache = CalculationCache(maxsize=10)
        cache.get("missing")
        cache.set("hit", value=1)
        cache.get("hit")
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_rate"] == "50.0%"

        cache.clear()
        assert len(cache) == 0
        assert cache.get_stats()["hits"] == 0

    def test_create_from_settings(self):
        lru = create_cache(Settings(cache_max_size=5, cache_ttl_seconds=0))
        assert lru.get_stats()["maxsize"] == 5
        ttl = create_cache(Settings(cache_max_size=5, cache_ttl_seconds=60))
        ttl.set("k", value=1)
        assert ttl.get("k") == 1
