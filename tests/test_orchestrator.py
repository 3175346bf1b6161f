"""Tests for the workspace orchestrator."""

from __future__ import annotations

import json

import pytest

from depsync.orchestrator import Orchestrator
from depsync.writer import NullFormatter
from tests._fixtures.package_builder import PackageBuilder


def _workspace(builder: PackageBuilder) -> None:
    builder.write_json("package.json", {"private": True, "workspaces": ["packages/*"]})
    builder.package(
        "packages/core",
        {"name": "@ws/core", "version": "1.2.0", "private": True},
        {"src/index.ts": "export const core = 1;\n"},
    )
    builder.package(
        "packages/app",
        {"name": "@ws/app", "version": "1.2.0", "private": True},
        {"src/index.ts": "import { core } from '@ws/core';\n"},
    )


def test_run_ensure_resolves_siblings_from_workspace(package_builder: PackageBuilder) -> None:
    _workspace(package_builder)
    root = package_builder.path().resolve()

    outcome = Orchestrator(formatter=NullFormatter()).run_ensure(root)

    app, core = outcome.packages
    assert app.name == "@ws/app"
    assert app.messages == [
        "Added dependency: @ws/core@^1.2.0",
        f"Updated {root / 'packages' / 'app' / 'tsconfig.json'}",
        "Updated package.json",
    ]
    assert core.messages == []
    assert outcome.changed is True

    tsconfig = json.loads((root / "packages" / "app" / "tsconfig.json").read_text(encoding="utf-8"))
    assert tsconfig == {"references": [{"path": "../core"}]}
    assert package_builder.manifest("packages/app")["dependencies"] == {"@ws/core": "^1.2.0"}

    again = Orchestrator(formatter=NullFormatter()).run_ensure(root)
    assert again.changed is False
    assert again.messages == []


def test_run_ensure_applies_config_and_persists_cache(package_builder: PackageBuilder) -> None:
    _workspace(package_builder)
    root = package_builder.path().resolve()
    package_builder.write(
        {
            ".depsync.yml": """
            cache_file: .cache/versions.json
            overrides:
              "@ws/app":
                missing: ["@ws/core"]
            """
        }
    )
    lookups = []

    def lookup(name: str) -> str:
        lookups.append(name)
        return "~9.9.9"

    outcome = Orchestrator(lookup=lookup, formatter=NullFormatter()).run_ensure(
        root, packages=["@ws/app"]
    )

    assert [package.name for package in outcome.packages] == ["@ws/app"]
    assert outcome.messages == []
    assert "dependencies" not in package_builder.manifest("packages/app")
    assert lookups == []
    assert not (root / ".cache" / "versions.json").exists()


def test_run_ensure_rejects_unknown_packages(package_builder: PackageBuilder) -> None:
    _workspace(package_builder)

    with pytest.raises(ValueError, match="@ws/nope"):
        Orchestrator(formatter=NullFormatter()).run_ensure(
            package_builder.path(), packages=["@ws/nope"]
        )


def test_run_ensure_writes_version_cache(package_builder: PackageBuilder) -> None:
    root = package_builder.path().resolve()
    package_builder.write({".depsync.yml": "cache_file: .cache/versions.json\n"})
    package_builder.package(
        "packages/app",
        {"name": "@ws/app", "private": True, "dependencies": {"react": "~17.0.0"}},
        {"src/index.ts": "import * as React from 'react';\n"},
    )

    outcome = Orchestrator(
        lookup={"react": "~18.2.0"}.__getitem__, formatter=NullFormatter()
    ).run_ensure(root)

    assert outcome.messages == [
        "Updated dependency: react@~18.2.0",
        "Updated package.json",
    ]
    cached = json.loads((root / ".cache" / "versions.json").read_text(encoding="utf-8"))
    assert cached == {"version": 1, "versions": {"react": "~18.2.0"}}


def test_run_ensure_generates_icons_for_configured_package(
    package_builder: PackageBuilder,
) -> None:
    root = package_builder.path().resolve()
    package_builder.write(
        {
            ".depsync.yml": "icons:\n  package: \"@ws/ui\"\n",
            "packages/ui/style/icons/add.svg": "<svg/>",
            "packages/ui/src/icon/iconimports.ts": "",
            "packages/ui/style/deprecated.css": "",
        }
    )
    package_builder.package("packages/ui", {"name": "@ws/ui", "private": True}, tsconfig=False)
    pkg = root / "packages" / "ui"

    outcome = Orchestrator(formatter=NullFormatter()).run_ensure(root)

    assert outcome.messages == [
        f"Updated {pkg / 'src' / 'icon' / 'iconimports.ts'}",
        f"Updated {pkg / 'style' / 'deprecated.css'}",
    ]


def test_run_icons_targets_single_package(package_builder: PackageBuilder) -> None:
    package_builder.write({"ui/style/icons/add.svg": "<svg/>"})
    pkg = package_builder.path() / "ui"

    messages = Orchestrator(formatter=NullFormatter()).run_icons(pkg)

    assert len(messages) == 2
    assert all(message.startswith("Tried to ensure the contents of") for message in messages)
