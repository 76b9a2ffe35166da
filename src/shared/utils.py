"""Shared utility functions."""
from __future__ import annotations

import os
from pathlib import Path


def atomic_write_text(path: Path | str, text: str) -> None:
    """Write text atomically by writing to a temp file then renaming.

    Args:
        path: Target file path.
        text: Content to write (UTF-8).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(str(tmp_path), str(path))
    except BaseException:
        # Clean up temp file on any failure
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def title_case_key(key: str) -> str:
    """Turn ``snake_case`` keys into ``Snake Case`` display labels."""
    return " ".join(word[:1].upper() + word[1:] for word in key.split("_"))
