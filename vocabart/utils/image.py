"""Image payload helpers: data URIs, filenames and Pillow loading."""

import base64
import binascii
import io
import re
from typing import Optional

from PIL import Image

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<b64>;base64)?,(?P<data>.*)$", re.DOTALL)

MIME_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def to_data_uri(data: bytes, mime: str = "image/png") -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into (mime type, raw bytes).

    Raises:
        ValueError: If `uri` is not a base64 data URI.
    """
    m = DATA_URI_PATTERN.match(uri or "")
    if not m or not m.group("b64"):
        raise ValueError(f"Not a base64 data URI: {(uri or '')[:40]!r}")
    try:
        raw = base64.b64decode(m.group("data"), validate=False)
    except binascii.Error as e:
        raise ValueError(f"Corrupt base64 payload: {e}") from e
    return m.group("mime") or "image/png", raw


def extension_for(mime: str) -> str:
    return MIME_EXTENSIONS.get(mime.lower(), "png")


def safe_filename(term: str) -> str:
    """Lowercase `term` with every character outside [a-z0-9] replaced by `_`."""
    return re.sub(r"[^a-z0-9]", "_", term, flags=re.IGNORECASE).lower()


def open_data_uri(uri: Optional[str]) -> Optional[Image.Image]:
    """Decode a data URI into an RGB Pillow image, or None if missing or unreadable."""
    if not uri:
        return None
    try:
        _, raw = decode_data_uri(uri)
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (ValueError, OSError):
        return None
    if img.mode in ("RGBA", "LA") or (img.mode == "P" and "transparency" in img.info):
        # Flatten transparency onto white, as the card face expects
        img = img.convert("RGBA")
        flat = Image.new("RGB", img.size, (255, 255, 255))
        flat.paste(img, mask=img.split()[-1])
        return flat
    if img.mode != "RGB":
        img = img.convert("RGB")
    return img
