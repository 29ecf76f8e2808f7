"""
Local file storage for uploads (templates, style guides, parsing jobs).
"""

import re
import uuid
from pathlib import Path

from app.core.config import settings

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def safe_file_name(file_name: str) -> str:
    name = Path(file_name or "upload").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


def save_upload(folder: str, file_name: str, data: bytes) -> Path:
    """Write bytes under upload_dir/folder with a unique prefix; return the path"""
    target_dir = Path(settings.upload_dir) / folder
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / f"{uuid.uuid4().hex[:12]}_{safe_file_name(file_name)}"
    path.write_bytes(data)
    return path


def read_upload(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def delete_upload(path: str | Path | None) -> None:
    if not path:
        return
    Path(path).unlink(missing_ok=True)
