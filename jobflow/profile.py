"""Build and share the candidate profile (resume merge, YAML export/import)."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from jobflow.config import CONFIG_DIR
from jobflow.log import get_logger
from jobflow.models import UserProfile

log = get_logger(__name__)

PROFILE_EXPORT_PATH: Path = CONFIG_DIR / "profile.yaml"


def merge_parsed_resume(profile: UserProfile, parsed: dict[str, Any], roles: list[str] | None = None) -> UserProfile:
    """Fill profile fields from parsed resume data without clobbering user input.

    Contact fields are only filled when empty; skills and suggested roles are
    unioned in order.
    """
    data = profile.to_dict()
    for key in ("name", "email", "phone"):
        if not data.get(key) and parsed.get(key):
            data[key] = parsed[key]
    if parsed.get("resume_text"):
        data["resume_text"] = parsed["resume_text"]
    data["skills"] = list(dict.fromkeys(list(data["skills"]) + list(parsed.get("skills") or [])))
    if roles:
        data["target_roles"] = list(dict.fromkeys(list(data["target_roles"]) + roles))
    return UserProfile.from_dict(data)


def write_profile(profile: UserProfile, path: Path | None = None) -> Path:
    """Write the profile to YAML so it can be edited or moved between machines."""
    path = path or PROFILE_EXPORT_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    header = (
        "# ============================================================\n"
        "# Candidate Profile — exported from JobFlow\n"
        "# Edit freely, then import it from the Profile page\n"
        "# ============================================================\n\n"
    )
    yaml_str = yaml.safe_dump(profile.to_dict(), default_flow_style=False, sort_keys=False, allow_unicode=True)
    path.write_text(header + yaml_str, encoding="utf-8")
    log.info("Profile written → %s", path)
    return path


def read_profile(source: Path | str) -> UserProfile:
    """Load a profile from a YAML path or YAML text."""
    if isinstance(source, Path):
        text = source.read_text(encoding="utf-8")
    else:
        text = source
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError("Profile YAML must be a mapping")
    return UserProfile.from_dict(data)
