"""Hatchling build hook that stamps the package with the git commit."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Any

from hatchling.builders.hooks.plugin.interface import BuildHookInterface

BUILD_INFO = "clack/_build_info.py"


class CustomBuildHook(BuildHookInterface):
    """Writes ``clack/_build_info.py`` so installed copies know their commit."""

    def initialize(self, version: str, build_data: dict[str, Any]) -> None:
        root = Path(self.root)
        commit = self._git(root, "rev-parse", "HEAD")
        date = self._git(root, "show", "-s", "--format=%cI", "HEAD")
        target = root / BUILD_INFO
        if commit is None and target.exists():
            # Building from an sdist: keep the stamp it was made with
            build_data.setdefault("artifacts", []).append(BUILD_INFO)
            return

        target.write_text(
            "# Auto-generated at build time.\n"
            f"COMMIT = {commit!r}\n"
            f"DATE = {date!r}\n",
            encoding="utf-8",
        )
        build_data.setdefault("artifacts", []).append(BUILD_INFO)

    @staticmethod
    def _git(cwd: Path, *args: str) -> str | None:
        try:
            out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
        except (subprocess.CalledProcessError, FileNotFoundError, OSError):
            # Build should not fail just because git is unavailable
            return None
        return out.decode().strip() or None
