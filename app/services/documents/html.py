"""
HTML to text

Readable text from fetched pages: chrome removed, headings kept as Markdown
markers and list items as bullets.
"""

import re
from typing import Optional, Tuple

from bs4 import BeautifulSoup, Comment

DROP_TAGS = ("script", "style", "noscript", "nav", "header", "footer", "aside")
HEADING_MARKERS = {"h1": "#", "h2": "##", "h3": "###", "h4": "####", "h5": "####", "h6": "####"}

_BLANK_RUNS = re.compile(r"\n\s*\n\s*\n+")
_SPACE_RUNS = re.compile(r"[ \t]+")


def _clean(text: str) -> str:
    text = text.replace("\xa0", " ")
    text = _SPACE_RUNS.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    return _BLANK_RUNS.sub("\n\n", text).strip()


def html_to_text(html: str) -> Tuple[Optional[str], str]:
    """Return (page title, text). The title is prepended to the text as '# Title'."""
    soup = BeautifulSoup(html, "html.parser")

    title = soup.title.get_text(strip=True) if soup.title else None

    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    for tag in soup.find_all(DROP_TAGS):
        tag.decompose()

    root = soup.find("article") or soup.find("main") or soup.body or soup

    for tag in root.find_all(list(HEADING_MARKERS)):
        tag.replace_with(f"\n\n{HEADING_MARKERS[tag.name]} {tag.get_text(' ', strip=True)}\n\n")
    for tag in root.find_all("li"):
        tag.insert_before("\n• ")
        tag.unwrap()
    for tag in root.find_all("br"):
        tag.replace_with("\n")
    for tag in root.find_all("p"):
        tag.insert_before("\n\n")
        tag.unwrap()

    text = _clean(root.get_text())
    if title:
        text = f"# {title}\n\n{text}"
    return title, text


def strip_tags(markup: str) -> str:
    """Plain text of arbitrary markup"""
    return _clean(BeautifulSoup(markup, "html.parser").get_text("\n"))
