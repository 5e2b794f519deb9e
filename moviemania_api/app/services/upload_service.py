"""
Poster uploads.

Posters are written to the images directory under a name that cannot
escape it, made unique by a timestamp and a random part.  An existing
file is never overwritten.  Serving the images is left to whatever
serves static files in front of the API.
"""

import logging
import re
import secrets
from pathlib import Path

from ..core.db import get_images_dir
from ..core.errors import InvalidInput, StoreError
from ..core.timeutil import now_ms


logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".gif"}
_UNSAFE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(original: str) -> str:
    """``"../My Poster.PNG"`` -> ``"<ms>-<random hex>-My-Poster.png"``."""
    name = Path(original.replace("\\", "/")).name
    stem, suffix = Path(name).stem, Path(name).suffix.lower()
    if suffix not in ALLOWED_EXTENSIONS:
        raise InvalidInput("Error: Only image files are accepted.")
    stem = _UNSAFE.sub("-", stem).strip("-.") or "poster"
    return f"{now_ms()}-{secrets.token_hex(4)}-{stem}{suffix}"


class UploadService:
    """Stores uploaded poster images."""

    @classmethod
    def store_poster(cls, original_name: str, content: bytes) -> str:
        """Write the poster and return its stored filename."""
        if not content:
            raise InvalidInput("Error: No file uploaded.")
        filename = safe_filename(original_name)
        target = get_images_dir() / filename
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as fh:
                fh.write(content)
        except FileExistsError:
            raise StoreError(f"Poster {target} already exists") from None
        except OSError as exc:
            raise StoreError(f"Cannot write poster {target}: {exc}") from exc
        logger.info("Stored poster %s (%d bytes)", filename, len(content))
        return filename
