"""
Upload policy for reference images.
"""
from typing import Sequence

from sitesketch.exceptions import UploadRejectedError
from sitesketch.models.request import ImagePayload


def format_size(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):.1f}MB"


def validate_images(images: Sequence[ImagePayload], max_images: int, max_total_bytes: int) -> None:
    """Reject image sets with too many files or too many bytes in total."""
    if len(images) > max_images:
        raise UploadRejectedError(
            f"Too many images: {len(images)} attached, at most {max_images} allowed",
            status_code=400,
        )

    total = sum(image.size for image in images)
    if total > max_total_bytes:
        raise UploadRejectedError(
            f"Images too large: {format_size(total)} in total, limit is {format_size(max_total_bytes)}",
            status_code=413,
        )
