import pytest

from jobflow.models import UserProfile
from jobflow.profile import merge_parsed_resume, read_profile, write_profile


def test_merge_keeps_user_input():
    profile = UserProfile(name="Ada", skills=["Python"], target_roles=["Backend Engineer"])
    parsed = {
        "name": "A. Lovelace",
        "email": "ada@example.com",
        "phone": "",
        "skills": ["Python", "Docker"],
        "resume_text": "Backend developer",
    }

    merged = merge_parsed_resume(profile, parsed, roles=["Backend Engineer", "Platform Engineer"])

    assert merged.name == "Ada"
    assert merged.email == "ada@example.com"
    assert merged.skills == ["Python", "Docker"]
    assert merged.target_roles == ["Backend Engineer", "Platform Engineer"]
    assert merged.resume_text == "Backend developer"


def test_yaml_export_and_import(tmp_path, profile):
    path = write_profile(profile, tmp_path / "profile.yaml")
    assert path.read_text().startswith("# ====")
    assert read_profile(path) == profile


def test_import_from_text_ignores_unknown_keys():
    loaded = read_profile("name: Ada\nfavourite_colour: blue\nskills:\n")
    assert loaded.name == "Ada"
    assert loaded.skills == []


def test_import_rejects_non_mapping():
    with pytest.raises(ValueError, match="mapping"):
        read_profile("- just\n- a list\n")
