# ============================================================================
# TASK TEMPLATE CACHE
# ============================================================================
# EPOCH: 1 - RESOURCE GRAPH
# STATUS: Graph - Process-wide template memoization
# PURPOSE: Resolve template ids to immutable templates, one upstream call per key
# CREATED: 19 OCT 2026
# ============================================================================
"""
Task Template Cache

Templates (ECS task definition revisions, Mesos task resources) never
change once created, so entries are write-once and never evicted or
invalidated. A failed fetch stores nothing; the next lookup retries
the upstream.

Concurrency:
    Single-flight per key. Concurrent first lookups of the same id
    wait on a per-key lock while one caller fetches; distinct ids fetch
    in parallel. The entry map itself is guarded by one lock.

Usage:
    cache = TemplateCache()
    template = cache.get(task.template_id, port.describe_template)
"""

import logging
import threading
from typing import Callable, Dict, Optional

from core.contracts import TaskTemplate

logger = logging.getLogger(__name__)


TemplateLoader = Callable[[str], TaskTemplate]


class TemplateCache:
    """Injected, explicitly owned template memo shared across computations."""

    def __init__(self):
        self._entries: Dict[str, TaskTemplate] = {}
        self._key_locks: Dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get(self, template_id: str, loader: TemplateLoader) -> TaskTemplate:
        """
        Return the cached template, loading it on a miss.

        Args:
            template_id: Template key
            loader: Upstream fetch (usually port.describe_template)

        Raises:
            Whatever the loader raises; nothing is cached in that case
        """
        entry = self._lookup(template_id)
        if entry is not None:
            return entry

        with self._key_lock(template_id):
            # Another caller may have filled it while we waited
            entry = self._lookup(template_id)
            if entry is not None:
                return entry

            template = loader(template_id)

            with self._lock:
                stored = self._entries.setdefault(template_id, template)
                self._key_locks.pop(template_id, None)
                self._misses += 1

            logger.debug(f"Cached template {template_id} ({stored.name})")
            return stored

    def _lookup(self, template_id: str) -> Optional[TaskTemplate]:
        with self._lock:
            entry = self._entries.get(template_id)
            if entry is not None:
                self._hits += 1
            return entry

    def _key_lock(self, template_id: str) -> threading.Lock:
        with self._lock:
            lock = self._key_locks.get(template_id)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[template_id] = lock
            return lock

    def peek(self, template_id: str) -> Optional[TaskTemplate]:
        """Cached entry without loading or counting a hit."""
        with self._lock:
            return self._entries.get(template_id)

    def __contains__(self, template_id: str) -> bool:
        with self._lock:
            return template_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "entries": len(self._entries),
                "hits": self._hits,
                "misses": self._misses,
            }


__all__ = [
    "TemplateCache",
    "TemplateLoader",
]
