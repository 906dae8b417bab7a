"""Load env and YAML settings configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobflow.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"
DATA_DIR: Path = ROOT_DIR / "data"
REPORTS_DIR: Path = ROOT_DIR / "reports"
STATE_PATH: Path = DATA_DIR / "jobflow_state.json"

AI_MODE_PERMISSIVE = "permissive"
AI_MODE_STRICT = "strict"

DEFAULT_SETTINGS: dict[str, Any] = {
    "ai": {
        "mode": AI_MODE_PERMISSIVE,
        "base_url": "https://api.groq.com/openai/v1",
        "model": "llama-3.3-70b-versatile",
        "max_attempts": 2,
        "base_delay": 1.0,
        "temperature": 0.3,
        "max_tokens": 1500,
    },
    "autopilot": {
        # Free-tier safety margin between LLM calls
        "analysis_delay": 10.0,
        "tick_interval": 0.5,
        "match_threshold": 60,
    },
    "sources": {
        "limit": 50,
        "timeout": 15,
    },
    "storage": {
        "max_logs": 50,
    },
}

_PLACEHOLDER_PREFIXES = ("your_", "your-", "<")


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = value
    return out


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Defaults, overlaid by ``config/settings.yaml``, overlaid by env vars."""
    path = path or SETTINGS_PATH
    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            log.warning("Ignoring unreadable settings file %s: %s", path.name, exc)
            data = {}

    settings = _deep_merge(DEFAULT_SETTINGS, data)

    ai = settings["ai"]
    ai["mode"] = (get_env("JOBFLOW_AI_MODE") or ai["mode"]).lower()
    ai["model"] = get_env("LLM_MODEL", "") or get_env("GROQ_LLM_MODEL", "") or ai["model"]
    ai["base_url"] = get_env("LLM_BASE_URL") or ai["base_url"]
    if ai["mode"] not in (AI_MODE_PERMISSIVE, AI_MODE_STRICT):
        log.warning("Unknown ai.mode %r, using %s", ai["mode"], AI_MODE_PERMISSIVE)
        ai["mode"] = AI_MODE_PERMISSIVE

    delay = get_env("AUTOPILOT_DELAY")
    if delay:
        try:
            settings["autopilot"]["analysis_delay"] = float(delay)
        except ValueError:
            log.warning("AUTOPILOT_DELAY=%r is not a number — ignored", delay)

    return settings


def is_placeholder(value: str | None) -> bool:
    if not value:
        return True
    low = value.strip().lower()
    return low in ("undefined", "null", "none", "") or low.startswith(_PLACEHOLDER_PREFIXES)


def get_api_key() -> str:
    """LLM key from LLM_API_KEY (or GROQ_API_KEY); empty when unset or a placeholder."""
    key = get_env("LLM_API_KEY") or get_env("GROQ_API_KEY")
    return "" if is_placeholder(key) else key


def ensure_dirs() -> None:
    for d in (DATA_DIR, REPORTS_DIR, CONFIG_DIR):
        d.mkdir(parents=True, exist_ok=True)


def write_settings(settings: dict[str, Any], path: Path | None = None) -> Path:
    path = path or SETTINGS_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    header = (
        "# ============================================================\n"
        "# JobFlow settings — values here override built-in defaults;\n"
        "# environment variables override values here\n"
        "# ============================================================\n\n"
    )
    yaml_str = yaml.safe_dump(settings, default_flow_style=False, sort_keys=False)
    path.write_text(header + yaml_str, encoding="utf-8")
    log.info("Settings written → %s", path)
    return path
