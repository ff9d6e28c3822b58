from collections.abc import Mapping

from imggen_storage.core.utils.constants import SUPPORTED_MIME_TYPES

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
    b"II*\x00": "image/tiff",
    b"MM\x00*": "image/tiff",
}


def normalize_mime_type(mime_type: str | None) -> str:
    return (mime_type or "").strip().lower()


def is_supported_mime_type(mime_type: str | None) -> bool:
    """Case-insensitive membership test against the supported image MIME types."""
    return normalize_mime_type(mime_type) in SUPPORTED_MIME_TYPES


def detect_mime_type(file_data: bytes) -> str:
    # RIFF is shared by several containers, WEBP is at offset 8
    if file_data.startswith(b"RIFF") and file_data[8:12] == b"WEBP":
        return "image/webp"

    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    raise ValueError("Unsupported or unknown file type")
