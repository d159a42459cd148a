from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from teleguard.utils.file_ops import PathLike

DEFAULT_FONT_URL = "https://raw.githubusercontent.com/google/fonts/main/ofl/sarabun/Sarabun-Regular.ttf"


@dataclass
class AppConfig:
    # Provider chain for checklist drafting, tried in order.
    providers: List[str] = field(default_factory=lambda: ["gemini"])
    gemini_model: str = "gemini-2.5-flash"
    local_llm_url: str = "http://localhost:11434/api/chat"
    local_llm_model: str = "llama3.1:8b"
    checklist_language: str = "English"

    report_dir: Path = Path("reports")
    report_font_url: str = DEFAULT_FONT_URL
    font_cache_dir: Path = Path(".teleguard") / "fonts"

    date_format: str = "%d/%m/%Y"
    log_level: str = "INFO"


# env var -> config key
ENV_OVERRIDES: Dict[str, str] = {
    "TELEGUARD_PROVIDERS": "providers",
    "GEMINI_MODEL": "gemini_model",
    "LOCAL_LLM_URL": "local_llm_url",
    "LOCAL_LLM_MODEL": "local_llm_model",
    "TELEGUARD_LANGUAGE": "checklist_language",
    "TELEGUARD_REPORT_DIR": "report_dir",
    "TELEGUARD_FONT_URL": "report_font_url",
    "LOG_LEVEL": "log_level",
}


def _coerce(key: str, value: Any) -> Any:
    if key == "providers":
        if isinstance(value, str):
            value = value.split(",")
        return [str(v).strip().lower() for v in value if str(v).strip()]
    if key in ("report_dir", "font_cache_dir"):
        return Path(value)
    return "" if value is None else str(value)


def load_config(path: Optional[PathLike] = None) -> AppConfig:
    """
    Build the application config.

    Precedence (lowest to highest):
    - dataclass defaults
    - YAML file (`path`, or ./config.yaml when present)
    - environment variables listed in ENV_OVERRIDES
    """
    values: Dict[str, Any] = {}

    cfg_path = Path(path) if path else Path("config.yaml")
    if cfg_path.exists():
        raw = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{cfg_path} must contain a mapping at the top level")
        values.update(raw)
    elif path:
        raise FileNotFoundError(f"Config file not found: {cfg_path}")

    for env_name, key in ENV_OVERRIDES.items():
        env_value = os.getenv(env_name)
        if env_value is not None:
            values[key] = env_value

    known = {f.name for f in fields(AppConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    return AppConfig(**{key: _coerce(key, value) for key, value in values.items()})
