"""Single-flight cache of resolved dependency versions."""

from __future__ import annotations

import asyncio
import inspect
import json
from pathlib import Path
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

from ..logging import get_logger

_CACHE_VERSION = 1

Lookup = Callable[[str], Union[str, Awaitable[str]]]

logger = get_logger("cache")


class DependencyVersionCache:
    """Maps dependency names to versions, resolving each name at most once.

    Concurrent ``resolve`` calls for the same name share one in-flight lookup.
    Failed lookups are not cached.
    """

    def __init__(
        self,
        lookup: Lookup,
        seed: Mapping[str, str] | None = None,
        *,
        path: Path | None = None,
    ) -> None:
        self._lookup = lookup
        self._path = path
        self._versions: Dict[str, str] = {}
        self._pending: Dict[str, asyncio.Future[str]] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)
        if seed:
            self._versions.update(seed)

    def __contains__(self, name: object) -> bool:
        return name in self._versions

    def get(self, name: str) -> Optional[str]:
        return self._versions.get(name)

    @property
    def versions(self) -> Dict[str, str]:
        """Return a snapshot of the resolved versions."""
        return dict(self._versions)

    async def resolve(self, name: str) -> str:
        """Return the version for ``name``, looking it up on first use."""
        version = self._versions.get(name)
        if version is not None:
            return version
        pending = self._pending.get(name)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(name))
            self._pending[name] = pending
        return await pending

    async def resolve_many(self, names: Iterable[str]) -> Dict[str, str]:
        """Resolve several names concurrently; the result follows ``names`` order."""
        ordered: List[str] = list(dict.fromkeys(names))
        versions = await asyncio.gather(*(self.resolve(name) for name in ordered))
        return dict(zip(ordered, versions))

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {"version": _CACHE_VERSION, "versions": self._versions}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False

    async def _fetch(self, name: str) -> str:
        try:
            if inspect.iscoroutinefunction(self._lookup):
                version = await self._lookup(name)
            else:
                loop = asyncio.get_running_loop()
                version = await loop.run_in_executor(None, self._lookup, name)
            logger.debug("Looked up %s@%s", name, version)
            self._versions[name] = version
            self._dirty = True
            return version
        finally:
            self._pending.pop(name, None)

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        versions = data.get("versions")
        if not isinstance(versions, dict):
            return
        self._versions.update(
            {key: value for key, value in versions.items() if isinstance(key, str) and isinstance(value, str)}
        )


__all__ = ["DependencyVersionCache"]
