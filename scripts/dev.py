#!/usr/bin/env python3
"""Development task runner for the subagent catalog.

Usage:
    python scripts/dev.py lint        # ruff check
    python scripts/dev.py format      # ruff format + fix
    python scripts/dev.py check       # format check + lint + mypy
    python scripts/dev.py test        # pytest over every package
    python scripts/dev.py catalog     # validate the sample catalog
    python scripts/dev.py clean       # remove caches
"""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SAMPLE_CATALOG = ROOT / "examples" / "catalog"

_PY = sys.executable
_SOURCES = ["packages/", "examples/", "scripts/"]


def _run(cmd: list[str], *, check: bool = True) -> int:
    print(f"\n$ {' '.join(cmd)}\n")
    result = subprocess.run(cmd, cwd=ROOT, check=False)
    if check and result.returncode != 0:
        sys.exit(result.returncode)
    return result.returncode


def lint() -> None:
    """Run ruff without fixing."""
    _run([_PY, "-m", "ruff", "check", *_SOURCES])


def fmt() -> None:
    """Format with ruff and apply safe lint fixes."""
    _run([_PY, "-m", "ruff", "format", *_SOURCES])
    _run([_PY, "-m", "ruff", "check", "--fix", *_SOURCES])


def check() -> None:
    """Format check, lint and type check without modifying files."""
    _run([_PY, "-m", "ruff", "format", "--check", *_SOURCES])
    lint()
    _run([_PY, "-m", "mypy", "packages/"], check=False)


def test() -> None:
    """Run the test suite."""
    _run([_PY, "-m", "pytest", "packages/", "-v"])


def catalog() -> None:
    """Validate the sample catalog the same way CI gates a pull request."""
    _run([_PY, "-m", "catalog_cli", "check", "--root", str(SAMPLE_CATALOG)])


def clean() -> None:
    """Remove cache and build artifacts outside the root virtualenv."""
    root_venv = ROOT / ".venv"
    removed = 0
    for pattern in ("__pycache__", ".pytest_cache", ".mypy_cache", ".ruff_cache", "*.egg-info", "build", "dist"):
        for path in ROOT.rglob(pattern):
            if root_venv in (path, *path.parents):
                continue
            if path.is_dir():
                shutil.rmtree(path)
            elif path.is_file():
                path.unlink()
            else:
                continue
            print(f"  Removed {path.relative_to(ROOT)}")
            removed += 1
    print(f"\n  Cleaned {removed} item(s)." if removed else "  Nothing to clean.")


TASKS = {
    "lint": lint,
    "format": fmt,
    "fmt": fmt,
    "check": check,
    "test": test,
    "catalog": catalog,
    "clean": clean,
}


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help", "help"):
        print(__doc__)
        for name, fn in TASKS.items():
            print(f"  {name:10s} {fn.__doc__ or ''}")
        sys.exit(0)

    task = TASKS.get(sys.argv[1])
    if task is None:
        print(f"Unknown task: {sys.argv[1]}")
        print(f"Available: {', '.join(TASKS)}")
        sys.exit(1)
    task()


if __name__ == "__main__":
    main()
