from enum import Enum
from typing import Optional


# ============================================================================
# Media Kinds
# ============================================================================

RGB_IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg"})
RGBA_IMAGE_EXTENSIONS = frozenset({"png"})
VIDEO_EXTENSIONS = frozenset({"mp4", "mov", "avi", "mkv", "webm", "wmv", "flv"})


class MediaKind(Enum):
    """Kind of media a file holds, derived from its extension only."""

    RGB_IMAGE = "rgb_image"
    RGBA_IMAGE = "rgba_image"
    VIDEO = "video"
    UNSUPPORTED = "unsupported"

    @property
    def output_extension(self) -> Optional[str]:
        """Extension (without dot) written for this kind, or None if unsupported."""
        return _OUTPUT_EXTENSIONS.get(self)

    @property
    def is_image(self) -> bool:
        return self in (MediaKind.RGB_IMAGE, MediaKind.RGBA_IMAGE)


_OUTPUT_EXTENSIONS = {
    MediaKind.RGB_IMAGE: "jpg",
    MediaKind.RGBA_IMAGE: "png",
    MediaKind.VIDEO: "mp4",
}


def normalize_extension(extension: Optional[str]) -> str:
    """Lower-case an extension and drop a leading dot ('.JPG' -> 'jpg')."""
    if not extension:
        return ""
    return extension.lower().lstrip(".")


def classify(extension: Optional[str]) -> MediaKind:
    """
    Map a file extension to its media kind.

    Case-insensitive; a leading dot is accepted. Missing or unknown
    extensions map to MediaKind.UNSUPPORTED.
    """
    ext = normalize_extension(extension)
    if ext in RGB_IMAGE_EXTENSIONS:
        return MediaKind.RGB_IMAGE
    if ext in RGBA_IMAGE_EXTENSIONS:
        return MediaKind.RGBA_IMAGE
    if ext in VIDEO_EXTENSIONS:
        return MediaKind.VIDEO
    return MediaKind.UNSUPPORTED
