"""npm registry client used to resolve published versions."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..logging import get_logger

logger = get_logger("registry")


class VersionLookupError(LookupError):
    """Raised when a dependency version cannot be resolved."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Unable to resolve a version for '{name}': {reason}")
        self.name = name
        self.reason = reason


@dataclass
class RegistryRequest:
    """Represents a metadata request against the package registry."""

    name: str
    url: str
    request_timeout: Optional[float]


class RegistryClient:
    """Fetches the ``latest`` dist-tag of packages from an npm registry."""

    DEFAULT_REGISTRY = "https://registry.npmjs.org"
    ENV_REGISTRY_KEYS = ("DEPSYNC_REGISTRY", "NPM_CONFIG_REGISTRY")

    def __init__(
        self,
        registry: str | None = None,
        *,
        request_timeout: Optional[float] = 30.0,
        fetcher: Callable[[RegistryRequest], bytes] | None = None,
    ) -> None:
        self.registry = self._resolve_registry(registry)
        self.request_timeout = request_timeout
        self._fetcher = fetcher or self._http_fetcher

    def latest_version(self, name: str) -> str:
        """Return the version currently tagged ``latest`` for ``name``."""
        request = RegistryRequest(
            name=name,
            url=f"{self.registry}/{quote(name, safe='@')}/latest",
            request_timeout=self.request_timeout,
        )
        raw = self._fetcher(request)
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise VersionLookupError(name, "registry returned invalid JSON") from exc
        version = payload.get("version") if isinstance(payload, dict) else None
        if not isinstance(version, str) or not version:
            raise VersionLookupError(name, "registry response has no version")
        logger.debug("Registry reports %s@%s", name, version)
        return version

    def lookup(self, name: str) -> str:
        """Return the tilde range of the latest published version."""
        return f"~{self.latest_version(name)}"

    @staticmethod
    def _http_fetcher(request: RegistryRequest) -> bytes:
        http_request = Request(request.url, headers={"Accept": "application/json"})
        timeout = request.request_timeout or 30.0
        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                return response.read()
        except HTTPError as exc:
            raise VersionLookupError(
                request.name, f"registry responded with status {exc.code}"
            ) from exc
        except URLError as exc:
            raise VersionLookupError(request.name, f"registry unreachable: {exc.reason}") from exc

    def _resolve_registry(self, registry: str | None) -> str:
        if registry:
            return registry.rstrip("/")
        env_value = self._first_env_value(self.ENV_REGISTRY_KEYS)
        if env_value:
            return env_value.rstrip("/")
        return self.DEFAULT_REGISTRY

    @staticmethod
    def _first_env_value(keys: Sequence[str]) -> str | None:
        for key in keys:
            value = os.getenv(key)
            if value:
                return value
        return None


__all__ = ["RegistryClient", "RegistryRequest", "VersionLookupError"]
