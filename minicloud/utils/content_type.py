"""Content type detection from raw bytes and the inline/attachment decision."""
import magic

from minicloud.errors import StorageFailureError

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# enough for libmagic to recognise every format it knows by header
SNIFF_BYTES = 8192

INLINE_FAMILIES = ("text/", "image/", "audio/", "video/")
INLINE_TYPES = frozenset({
    "application/pdf",
    "application/json",
    "application/xml",
    "application/javascript",
})

INLINE = "inline"
ATTACHMENT = "attachment"


def sniff_content_type(data: bytes) -> str:
    if not data:
        return DEFAULT_CONTENT_TYPE
    try:
        detected = magic.from_buffer(data[:SNIFF_BYTES], mime=True)
    except magic.MagicException as error:
        raise StorageFailureError("Could not detect file type") from error
    return detected or DEFAULT_CONTENT_TYPE


def base_type(content_type: str) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def disposition_for(content_type: str) -> str:
    media_type = base_type(content_type)
    if media_type.startswith(INLINE_FAMILIES) or media_type in INLINE_TYPES:
        return INLINE
    return ATTACHMENT
