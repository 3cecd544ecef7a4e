from __future__ import annotations

import os
import re
import shutil
from pathlib import Path


DEFAULT_SUBDIRS = [
    "uploads",
    "exports",
]

_UNSAFE_CHARS = re.compile(r"[^\w.@-]+")


def _base_root() -> Path:
    env_root = os.getenv("TIMESHEETS_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "timesheets"


def _safe_segment(value: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", value).strip("._")
    return cleaned or "_"


def ensure_user_root(user_id: str) -> Path:
    """Ensure the per-user folders exist and return the root path."""

    root = _base_root() / _safe_segment(user_id)
    for sub in DEFAULT_SUBDIRS:
        (root / sub).mkdir(parents=True, exist_ok=True)
    return root


def save_raw_file(user_id: str, filename: str, source) -> Path:
    """Persist an uploaded spreadsheet under the user's uploads directory."""

    safe_name = Path(filename).name
    root = ensure_user_root(user_id)
    target = root / "uploads" / safe_name
    with target.open("wb") as buffer:
        shutil.copyfileobj(source, buffer)
    return target


def export_path(user_id: str, filename: str) -> Path:
    root = ensure_user_root(user_id)
    return root / "exports" / Path(filename).name
