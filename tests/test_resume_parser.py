import io
import zipfile
from pathlib import Path

import pytest

from jobflow.resume_parser import MIME_DOCX, extract_text, extract_text_from_bytes, heuristic_parse, mime_for


def _docx(*paragraphs):
    ns = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
    body = "".join(f"<w:p><w:r><w:t>{p}</w:t></w:r></w:p>" for p in paragraphs)
    xml = f'<?xml version="1.0"?><w:document xmlns:w="{ns}"><w:body>{body}</w:body></w:document>'
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("word/document.xml", xml)
    return buf.getvalue()


def test_docx_paragraphs():
    assert extract_text_from_bytes(_docx("Ada Lovelace", "Python"), MIME_DOCX) == "Ada Lovelace\nPython"


def test_text_file(tmp_path):
    path = tmp_path / "resume.txt"
    path.write_text("Ada Lovelace\nGo and Rust")
    assert extract_text(path) == "Ada Lovelace\nGo and Rust"


def test_unsupported_suffix():
    with pytest.raises(ValueError, match=".png"):
        mime_for(Path("resume.png"))


def test_heuristic_parse():
    text = "Ada Lovelace\nada@example.com | +1 555 123 4567\nSkills: Go, C++, NodeJS, Java"
    parsed = heuristic_parse(text)
    assert parsed["name"] == "Ada Lovelace"
    assert parsed["email"] == "ada@example.com"
    assert parsed["phone"] == "+1 555 123 4567"
    assert parsed["skills"] == ["Java", "Go", "C++"]
    assert "\n" not in parsed["resume_text"]
