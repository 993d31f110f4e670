"""Storage initialization, path helpers, and slug utilities."""

import re
import unicodedata
from pathlib import Path

_data_dir: Path | None = None

_SAFE_ID = re.compile(r"[A-Za-z0-9_-]+")


def slugify(title: str) -> str:
    """Convert a title to a filesystem-safe slug.

    "Dragon's Hollow Company" → "dragons-hollow-company"
    """
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii")
    text = text.lower()
    text = re.sub(r"['\"]", "", text)  # strip apostrophes/quotes before hyphenation
    text = re.sub(r"[^a-z0-9]+", "-", text)
    text = text.strip("-")
    return text or "untitled"


def is_safe_id(value: str) -> bool:
    """True if ``value`` can be used as a file name stem as-is."""
    return bool(_SAFE_ID.fullmatch(value))


def init_storage(data_dir: Path) -> None:
    global _data_dir
    _data_dir = data_dir
    _data_dir.mkdir(parents=True, exist_ok=True)
    game_states_dir().mkdir(exist_ok=True)
    parties_dir().mkdir(exist_ok=True)


def data_dir() -> Path:
    assert _data_dir is not None, "Call init_storage() before using storage"
    return _data_dir


def game_states_dir() -> Path:
    return data_dir() / "game-states"


def parties_dir() -> Path:
    return data_dir() / "parties"
