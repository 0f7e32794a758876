#!/usr/bin/env python3
"""Development task runner for resourceroutes.

Usage:
    python scripts/dev.py lint [PACKAGE]     # Check linting
    python scripts/dev.py format [PACKAGE]   # Auto-format code
    python scripts/dev.py check [PACKAGE]    # Format check + lint + type check
    python scripts/dev.py test [PACKAGE]     # Run tests
    python scripts/dev.py example            # Serve the example resource tree over stdio
    python scripts/dev.py clean              # Remove cache files

PACKAGE is one of core, fs, http or mcp; without it a task covers every
package.
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

PACKAGES = {
    "core": "packages/core/resourceroutes-core",
    "fs": "packages/providers/resourceroutes-fs",
    "http": "packages/providers/resourceroutes-http",
    "mcp": "packages/integrations/resourceroutes-mcp",
}

# Use sys.executable -m so tools resolve from the active venv.
_PY = sys.executable


def _run(cmd: list[str], *, check: bool = True) -> int:
    print(f"\n--- {' '.join(cmd)}\n")
    result = subprocess.run(cmd, cwd=ROOT, check=False)
    if check and result.returncode != 0:
        sys.exit(result.returncode)
    return result.returncode


def _targets(package: str | None) -> list[str]:
    if package is None:
        return ["packages/", "examples/"]
    if package not in PACKAGES:
        print(f"Unknown package: {package} (expected one of {', '.join(PACKAGES)})")
        sys.exit(1)
    return [PACKAGES[package]]


def lint(package: str | None) -> None:
    """Run ruff linter (check only, no fixes)."""
    _run([_PY, "-m", "ruff", "check", *_targets(package)])


def fmt(package: str | None) -> None:
    """Auto-format code with ruff and apply lint fixes."""
    _run([_PY, "-m", "ruff", "format", *_targets(package)])
    _run([_PY, "-m", "ruff", "check", "--fix", *_targets(package)])


def check(package: str | None) -> None:
    """Run format check, lint and mypy without modifying files."""
    _run([_PY, "-m", "ruff", "format", "--check", *_targets(package)])
    lint(package)
    sources = [t for t in _targets(package) if t != "examples/"]
    _run([_PY, "-m", "mypy", *sources], check=False)


def test(package: str | None) -> None:
    """Run the test suite."""
    paths = ["packages/"] if package is None else [f"{_targets(package)[0]}/tests"]
    _run([_PY, "-m", "pytest", *paths, "-v"])


def example(package: str | None) -> None:
    """Serve examples/fs over stdio with DEBUG logging."""
    config = ROOT / "examples" / "fs" / "server.yaml"
    _run([_PY, "-m", "resourceroutes_mcp", "--config", str(config), "--log-level", "DEBUG"])


def clean(package: str | None) -> None:
    """Remove cache and build artifacts."""
    patterns = ["__pycache__", ".pytest_cache", ".mypy_cache", ".ruff_cache", "*.egg-info"]
    root_venv = ROOT / ".venv"
    removed = 0
    for pattern in patterns:
        for path in ROOT.rglob(pattern):
            if root_venv in (path, *path.parents):
                continue
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
            removed += 1
    print(f"Cleaned {removed} item(s).")


TASKS: dict[str, Callable[[str | None], None]] = {
    "lint": lint,
    "format": fmt,
    "fmt": fmt,
    "check": check,
    "test": test,
    "example": example,
    "clean": clean,
}


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print(__doc__)
        sys.exit(0)

    task = TASKS.get(sys.argv[1])
    if task is None:
        print(f"Unknown task: {sys.argv[1]}")
        print(f"Available: {', '.join(TASKS)}")
        sys.exit(1)

    task(sys.argv[2] if len(sys.argv) > 2 else None)


if __name__ == "__main__":
    main()
