import threading
from typing import Any, Dict, Iterable, List, Optional


class ArticleCache:
    """
    Process-local holder for the latest article batch.

    The batch is replaced wholesale, never merged. Reads hand out copies so
    callers cannot mutate cached articles.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._articles: List[Dict[str, Any]] = []

    def replace(self, batch: Optional[Iterable[Dict[str, Any]]]) -> int:
        fresh = [dict(a) for a in (batch or [])]
        with self._lock:
            self._articles = fresh
            return len(fresh)

    def read_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(a) for a in self._articles]

    def __len__(self) -> int:
        with self._lock:
            return len(self._articles)
