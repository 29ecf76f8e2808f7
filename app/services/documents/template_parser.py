"""
Offer template parsing

Finds fill-in placeholders and the section structure of a DOCX template.
"""

import re
from pathlib import Path
from typing import List

from app.core.errors import ValidationError
from app.schemas.templates import ParsedTemplate, TemplateStructure
from app.services.documents.parser import extract_docx_text

PLACEHOLDER_PATTERNS = [
    re.compile(r"\{\{([^}]+)\}\}"),            # {{name}}
    re.compile(r"\[\[([^\]]+)\]\]"),           # [[name]]
    re.compile(r"\$\{([^}]+)\}"),              # ${name}
    re.compile(r"<([A-Z_]+)>"),                # <NAME>
    re.compile(r"\[([A-Z_][A-Z0-9_]*)\]"),     # [NAME_1]
    re.compile(r"__([A-Z_]+)__"),              # __NAME__
]

NUMBERED_HEADING = re.compile(r"^\d+\.?\s+[A-Z]")
SECTION_HEADING = re.compile(r"^(Section|Chapter|Part)\s+\d+", re.IGNORECASE)
MARKDOWN_HEADING = re.compile(r"^#+\s+")

MAX_SECTIONS = 10


def detect_placeholders(text: str) -> List[str]:
    """Every placeholder match and its inner name, in order of discovery"""
    found = {}
    for pattern in PLACEHOLDER_PATTERNS:
        for match in pattern.finditer(text):
            found.setdefault(match.group(0), None)
            if match.group(1):
                found.setdefault(match.group(1), None)
    return list(found)


def is_heading(line: str) -> bool:
    return (
        (3 < len(line) < 100 and line == line.upper())
        or bool(NUMBERED_HEADING.match(line))
        or bool(SECTION_HEADING.match(line))
        or bool(MARKDOWN_HEADING.match(line))
    )


def extract_structure(text: str) -> TemplateStructure:
    headings: List[str] = []
    sections: List[str] = []
    current = ""

    for line in (raw.strip() for raw in text.split("\n")):
        if not line:
            continue
        if is_heading(line):
            if current:
                sections.append(current.strip())
            headings.append(line)
            current = line + "\n"
        else:
            current += line + "\n"

    if current:
        sections.append(current.strip())

    return TemplateStructure(
        headings=headings,
        section_count=len(sections),
        sections=sections[:MAX_SECTIONS],
    )


def parse_template(data: bytes, file_name: str) -> ParsedTemplate:
    if Path(file_name or "").suffix.lower() != ".docx":
        raise ValidationError("Only DOCX files are supported for template parsing")

    # Headings are found from the text itself, so no '#' markers here
    text = extract_docx_text(data, markdown_headings=False)
    return ParsedTemplate(
        content=text,
        placeholders=detect_placeholders(text),
        structure=extract_structure(text),
    )
