import re
from pathlib import Path
from typing import Union


PathLike = Union[str, Path]

_UNSAFE_CHARS_RE = re.compile(r"[\\/:*?\"<>|]+")


def ensure_dir(path: PathLike) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def safe_filename(name: str, fallback: str = "project") -> str:
    cleaned = _UNSAFE_CHARS_RE.sub("_", name).strip()
    return cleaned or fallback
