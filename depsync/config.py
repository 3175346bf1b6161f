"""Configuration loading for depsync (.depsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".depsync.yml"

DEFAULT_TEST_LIBRARIES = ("jest", "ts-jest")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class DocsConfig:
    """Locations written into documentation tool configs."""

    api_dir: str = "../../docs/api"
    theme: str = "../../typedoc-theme"


@dataclass
class IconsConfig:
    """Settings for the icon asset generator."""

    package: Optional[str] = None
    dynamic: bool = False
    css_prefix: str = "jp"


@dataclass
class PackageOverrides:
    """Per-package exception lists."""

    missing: List[str] = field(default_factory=list)
    unused: List[str] = field(default_factory=list)
    css_imports: List[str] = field(default_factory=list)
    check_unused: bool = True


@dataclass
class DepsyncConfig:
    """Represents the settings defined in .depsync.yml."""

    root: Path
    packages: List[str] = field(default_factory=list)
    registry: Optional[str] = None
    cache_file: Optional[Path] = None
    prettier: bool = True
    namespace: str = "depsync"
    prepublish_script: str = "npm run build"
    test_libraries: List[str] = field(default_factory=lambda: list(DEFAULT_TEST_LIBRARIES))
    different_versions: List[str] = field(default_factory=list)
    docs: DocsConfig = field(default_factory=DocsConfig)
    icons: IconsConfig = field(default_factory=IconsConfig)
    overrides: Dict[str, PackageOverrides] = field(default_factory=dict)

    def overrides_for(self, name: str) -> PackageOverrides:
        """Return the exception lists for a package, empty when not configured."""
        return self.overrides.get(name) or PackageOverrides()


def load_config(config_path: Path) -> DepsyncConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DepsyncConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = DepsyncConfig(root=root)
    config.packages = _as_str_list(data.get("packages"))
    config.registry = _as_str(data.get("registry"))
    cache_file = _as_str(data.get("cache_file"))
    config.cache_file = root / cache_file if cache_file else None
    prettier = _as_bool(data.get("prettier"))
    if prettier is not None:
        config.prettier = prettier
    config.namespace = _as_str(data.get("namespace")) or config.namespace
    config.prepublish_script = _as_str(data.get("prepublish_script")) or config.prepublish_script
    if "test_libraries" in data:
        config.test_libraries = _as_str_list(data.get("test_libraries"))
    config.different_versions = _as_str_list(data.get("different_versions"))

    docs_data = _as_dict(data.get("docs"))
    if docs_data:
        config.docs = DocsConfig(
            api_dir=_as_str(docs_data.get("api_dir")) or DocsConfig.api_dir,
            theme=_as_str(docs_data.get("theme")) or DocsConfig.theme,
        )

    icons_data = _as_dict(data.get("icons"))
    if icons_data:
        config.icons = IconsConfig(
            package=_as_str(icons_data.get("package")),
            dynamic=_as_bool(icons_data.get("dynamic")) or False,
            css_prefix=_as_str(icons_data.get("css_prefix")) or IconsConfig.css_prefix,
        )

    overrides_data = _as_dict(data.get("overrides"))
    for name, entry in overrides_data.items():
        if not isinstance(entry, dict):
            raise ConfigError(f"overrides for '{name}' must be a mapping")
        check_unused = _as_bool(entry.get("check_unused"))
        config.overrides[str(name)] = PackageOverrides(
            missing=_as_str_list(entry.get("missing")),
            unused=_as_str_list(entry.get("unused")),
            css_imports=_as_str_list(entry.get("css_imports")),
            check_unused=True if check_unused is None else check_unused,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DepsyncConfig",
    "DocsConfig",
    "IconsConfig",
    "PackageOverrides",
    "load_config",
]
