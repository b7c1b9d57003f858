"""Disk-backed memo of compiler flag probe results.

Probing the full candidate list costs one compiler invocation per flag,
roughly 80 subprocess launches per configure run.  Results only depend on
the compiler and the flag, so they are remembered between runs the same
way a build system keeps ``HAVE_<flag>`` entries in its cache.

Cache location
~~~~~~~~~~~~~~
``{project_root}/.warnscope/probe_cache/``, gitignored by convention.

Cache key
~~~~~~~~~
SHA-256 of ``(schema_version, compiler command, msvc mode, flag)``.  The
compiler binary's contents are NOT tracked; after upgrading the compiler
in place run ``warnscope cache clear``.
"""

from __future__ import annotations

import hashlib
import threading
from pathlib import Path
from typing import Any

import diskcache

# Bump when key semantics change to avoid stale hits across upgrades.
CACHE_SCHEMA_VERSION = 1

# Entries are a few bytes each; 16 MB is effectively unbounded.
_DEFAULT_SIZE_LIMIT = 16 * 1024 * 1024


class ProbeCache:
    """Disk-backed cache mapping (compiler, flag) to a supported/unsupported verdict.

    Backed by ``diskcache.Cache`` (SQLite + filesystem), which is
    thread-safe, so parallel probes may share one instance.
    """

    def __init__(self, cache_dir: str | Path, size_limit: int = _DEFAULT_SIZE_LIMIT) -> None:
        self._cache = diskcache.Cache(str(cache_dir), size_limit=size_limit)

    def get(self, key: str) -> bool | None:
        """Return the cached verdict for *key*, or ``None`` on miss."""
        result = self._cache.get(key, default=None)
        return result if isinstance(result, bool) else None

    def put(self, key: str, supported: bool) -> None:
        self._cache.set(key, bool(supported))

    @property
    def count(self) -> int:
        """Number of entries in the cache."""
        return len(self._cache)

    @property
    def volume(self) -> int:
        """Total bytes used by the cache on disk."""
        return self._cache.volume()

    def clear(self) -> None:
        self._cache.clear()

    def close(self) -> None:
        self._cache.close()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics as a dict."""
        return {
            "entries": self.count,
            "volume_bytes": self.volume,
            "volume_mb": round(self.volume / (1024 * 1024), 2),
            "size_limit_mb": round(self._cache.size_limit / (1024 * 1024), 2),
        }


def probe_cache_key(compiler: list[str], flag: str, msvc: bool) -> str:
    """Compute a SHA-256 cache key for one probe.

    Command parts are joined with ``\\0`` so ``["cc", "-m32"]`` and
    ``["cc -m32"]`` hash differently.
    """
    h = hashlib.sha256()
    h.update(f"v{CACHE_SCHEMA_VERSION}\0".encode())
    h.update(f"compiler={chr(0).join(compiler)}\0".encode())
    h.update(f"msvc={int(msvc)}\0".encode())
    h.update(f"flag={flag}\0".encode())
    return h.hexdigest()


# ---------------------------------------------------------------------------
# Module-level cache registry (avoids re-opening SQLite on every call)
# ---------------------------------------------------------------------------

_caches: dict[str, ProbeCache] = {}
_caches_lock = threading.Lock()


def probe_cache_dir(project_root: Path) -> Path:
    return project_root / ".warnscope" / "probe_cache"


def get_probe_cache(project_root: Path) -> ProbeCache:
    """Return a shared ``ProbeCache`` for a project root.

    Multiple calls with the same root return the same instance.
    """
    cache_dir = str(probe_cache_dir(project_root))
    with _caches_lock:
        if cache_dir not in _caches:
            _caches[cache_dir] = ProbeCache(cache_dir)
        return _caches[cache_dir]


def close_all_caches() -> None:
    """Close all open cache instances (for clean shutdown in tests)."""
    with _caches_lock:
        for cache in _caches.values():
            cache.close()
        _caches.clear()
