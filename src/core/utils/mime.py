from pathlib import PurePosixPath

from core.utils.constants import EXTENSION_CONTENT_TYPE_MAP, FALLBACK_CONTENT_TYPE


def normalized_extension(filename: str) -> str:
    """Return the lower-cased extension of ``filename`` including the dot, or ``""``."""
    return PurePosixPath(filename).suffix.lower()


def content_type_for_filename(filename: str) -> str:
    return EXTENSION_CONTENT_TYPE_MAP.get(
        normalized_extension(filename),
        FALLBACK_CONTENT_TYPE,
    )
