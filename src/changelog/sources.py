"""Reads the flag document from the working tree or a git ref."""
from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def read_flags_at_ref(ref: str, rel_path: str, cwd: Path | str = ".") -> dict[str, Any] | None:
    """Return the flag document as committed at *ref*, or ``None``.

    Args:
        ref: Any git revision (``HEAD``, ``HEAD~1``, a sha, ...).
        rel_path: Path of the document relative to the repository root.
        cwd: Directory inside the repository.
    """
    try:
        result = subprocess.run(
            ["git", "show", f"{ref}:{rel_path}"],
            cwd=str(cwd),
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
    except (subprocess.CalledProcessError, OSError) as exc:
        logger.warning("git show %s:%s failed: %s", ref, rel_path, exc)
        return None

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        logger.warning("Invalid JSON at %s:%s: %s", ref, rel_path, exc)
        return None


def read_flags_file(path: Path | str) -> dict[str, Any] | None:
    """Return the flag document from the working tree, or ``None``."""
    path = Path(path)
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return None
