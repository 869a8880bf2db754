"""
계산 캐시
- 동일 입력에 대한 계산 결과 캐싱 (절기/음력 Fallback, 일별 사주)
- 메모리 기반, 호출자가 생성해서 주입
"""
from typing import Optional, Any, Callable, Union
from cachetools import TTLCache, LRUCache
import hashlib
import json
import threading

from sajucal.config import Settings, get_settings

_MISSING = object()


class CalculationCache:
    """
    계산 결과 캐싱 서비스

    캐시 키는 전체 입력 튜플에서 생성 (namespace 포함).
    결과는 입력이 고정이면 불변이므로 무효화가 필요 없음.
    None 결과도 캐시함 (Fallback 실패 재계산 방지).
    """

    def __init__(self, maxsize: int = 10000, ttl_seconds: int = 0):
        if ttl_seconds > 0:
            self._cache: Union[TTLCache, LRUCache] = TTLCache(maxsize=maxsize, ttl=ttl_seconds)
        else:
            self._cache = LRUCache(maxsize=maxsize)

        # cachetools 캐시는 thread-safe 아님
        self._lock = threading.Lock()

        # 통계
        self._hits = 0
        self._misses = 0

    @staticmethod
    def make_key(*args) -> str:
        """캐시 키 생성"""
        key_str = json.dumps(args, sort_keys=True, default=str, ensure_ascii=False)
        return hashlib.md5(key_str.encode()).hexdigest()

    def get(self, *args) -> Optional[Any]:
        """캐시 조회 (없으면 None)"""
        value = self._lookup(self.make_key(*args))
        return None if value is _MISSING else value

    def set(self, *args, value: Any) -> None:
        """캐시 저장"""
        key = self.make_key(*args)
        with self._lock:
            self._cache[key] = value

    def get_or_compute(self, namespace: str, args: tuple, compute: Callable[[], Any]) -> Any:
        """조회 후 없으면 계산해서 저장"""
        key = self.make_key(namespace, *args)
        value = self._lookup(key)
        if value is not _MISSING:
            return value

        value = compute()
        with self._lock:
            self._cache[key] = value
        return value

    def _lookup(self, key: str) -> Any:
        with self._lock:
            value = self._cache.get(key, _MISSING)
            if value is _MISSING:
                self._misses += 1
            else:
                self._hits += 1
        return value

    # ========== 통계 ==========

    def get_stats(self) -> dict:
        """캐시 통계 조회"""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0

        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": f"{hit_rate:.1f}%",
            "size": len(self._cache),
            "maxsize": self._cache.maxsize,
        }

    def clear(self):
        """캐시 초기화"""
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def __len__(self) -> int:
        return len(self._cache)


def create_cache(settings: Optional[Settings] = None) -> CalculationCache:
    """설정 기반 캐시 생성"""
    settings = settings or get_settings()
    return CalculationCache(
        maxsize=settings.cache_max_size,
        ttl_seconds=settings.cache_ttl_seconds,
    )
