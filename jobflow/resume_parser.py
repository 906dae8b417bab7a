"""Read resume files into plain text and pull basic fields out heuristically.

Supports PDF (via pypdf), DOCX (via stdlib zipfile) and plain text, either
from a path or from raw uploaded bytes plus a MIME type.
"""
from __future__ import annotations

import io
import re
import zipfile
from pathlib import Path
from typing import Any
from xml.etree import ElementTree

from jobflow.log import get_logger

log = get_logger(__name__)

MIME_PDF = "application/pdf"
MIME_DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MIME_TEXT = "text/plain"

_SUFFIX_MIME = {".pdf": MIME_PDF, ".docx": MIME_DOCX, ".txt": MIME_TEXT, ".md": MIME_TEXT}

# ── Text extraction ──────────────────────────────────────────────────────


def mime_for(path: Path) -> str:
    try:
        return _SUFFIX_MIME[path.suffix.lower()]
    except KeyError:
        raise ValueError(f"Unsupported resume format: {path.suffix}") from None


def extract_text(path: Path) -> str:
    """Return plain text from a PDF, DOCX, or TXT file."""
    return extract_text_from_bytes(path.read_bytes(), mime_for(path))


def extract_text_from_bytes(data: bytes, mime_type: str) -> str:
    mime = (mime_type or "").lower()
    if mime.startswith("text/"):
        return data.decode("utf-8", errors="ignore")
    if mime == MIME_DOCX:
        return _extract_docx(data)
    if mime == MIME_PDF:
        return _extract_pdf(data)
    raise ValueError(f"Unsupported resume MIME type: {mime_type}")


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction merges words together."""
    if not text or len(text) < 50:
        return text
    space_ratio = text.count(" ") / len(text)
    if space_ratio > 0.08:
        return text

    log.debug("Low space ratio (%.2f%%) — applying spacing fix", space_ratio * 100)
    fixed = re.sub(r"([a-z])([A-Z])", r"\1 \2", text)
    fixed = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", fixed)
    fixed = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", fixed)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def _extract_pdf(data: bytes) -> str:
    from pypdf import PdfReader

    reader = PdfReader(io.BytesIO(data))
    pages = [_fix_spacing(page.extract_text() or "") for page in reader.pages]
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    ns = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"
    texts: list[str] = []
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        with zf.open("word/document.xml") as f:
            tree = ElementTree.parse(f)
            for para in tree.iter(f"{ns}p"):
                parts = [node.text for node in para.iter(f"{ns}t") if node.text]
                if parts:
                    texts.append("".join(parts))
    return "\n".join(texts)


# ── Heuristic fallback ──────────────────────────────────────────────────

_EMAIL_RE = re.compile(r"[\w.+-]+@[\w-]+\.[\w.-]+")
_PHONE_RE = re.compile(r"[\+]?\d[\d\s\-().]{7,15}\d")

COMMON_SKILLS: list[str] = [
    "Python", "Java", "JavaScript", "TypeScript", "React", "Node.js", "Angular",
    "Vue", "SQL", "NoSQL", "MongoDB", "PostgreSQL", "MySQL", "Redis",
    "Docker", "Kubernetes", "AWS", "GCP", "Azure", "Terraform", "Ansible",
    "Jenkins", "Git", "Linux", "CI/CD", "REST", "GraphQL", "Microservices",
    "Agile", "Scrum", "Excel", "Power BI", "Tableau", "Salesforce",
    "Machine Learning", "Deep Learning", "NLP", "Data Science", "Pandas",
    "TensorFlow", "PyTorch", "Spark", "Kafka", "Elasticsearch",
    "Figma", "UI/UX", "Go", "Rust", "C++", "Swift", "Kotlin", "Flutter",
    "Communication", "Leadership", "Project Management",
]


def _has_skill(low_text: str, skill: str) -> bool:
    return re.search(r"(?<![a-z0-9])" + re.escape(skill.lower()) + r"(?![a-z0-9])", low_text) is not None


def heuristic_parse(text: str) -> dict[str, Any]:
    """Best-effort extraction without an LLM."""
    lines = [ln.strip() for ln in text.strip().splitlines() if ln.strip()]
    name = lines[0] if lines else ""
    if len(name) > 60 or _EMAIL_RE.search(name):
        name = ""

    email_match = _EMAIL_RE.search(text)
    phone_match = _PHONE_RE.search(text)

    low = text.lower()
    skills = [s for s in COMMON_SKILLS if _has_skill(low, s)]

    return {
        "name": name,
        "email": email_match.group(0) if email_match else "",
        "phone": phone_match.group(0).strip() if phone_match else "",
        "skills": skills[:10],
        "resume_text": re.sub(r"\s+", " ", text).strip()[:4000],
    }
