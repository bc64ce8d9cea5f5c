"""
Image inspection, re-encoding and thumbnails using Pillow.
"""

import io
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from listings_service.logging_config import logger

# Pillow format name -> (mime type, file extension)
FORMATS = {
    "JPEG": ("image/jpeg", "jpg"),
    "PNG": ("image/png", "png"),
    "WEBP": ("image/webp", "webp"),
    "GIF": ("image/gif", "gif"),
}


class InvalidImageError(ValueError):
    pass


@dataclass
class ImageInfo:
    format: str
    mime_type: str
    extension: str
    width: int
    height: int


def inspect_image(data: bytes) -> ImageInfo:
    """
    Identify an image from its bytes.

    Raises InvalidImageError if the content is not a decodable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
            image_format = img.format
            width, height = img.size
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError(f"Not a valid image: {e}") from e

    if image_format not in FORMATS:
        raise InvalidImageError(f"Unsupported image format: {image_format}")
    mime_type, extension = FORMATS[image_format]
    return ImageInfo(image_format, mime_type, extension, width, height)


def _rgb_for_jpeg(img: Image.Image) -> Image.Image:
    if img.mode in ("RGBA", "LA", "P"):
        return img.convert("RGB")
    return img


def _save(img: Image.Image, path: Path, image_format: str, quality: int) -> None:
    if image_format == "JPEG":
        _rgb_for_jpeg(img).save(path, "JPEG", quality=quality, optimize=True)
    elif image_format == "PNG":
        img.save(path, "PNG", optimize=True)
    elif image_format == "WEBP":
        img.save(path, "WEBP", quality=quality)
    else:
        img.save(path, image_format)


def optimize_image(path: Path, quality: int = 90) -> bool:
    """
    Re-encode an image in place at the given quality.

    Returns False (and leaves the original untouched) when re-encoding fails
    or would make the file larger.
    """
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        with Image.open(path) as img:
            image_format = img.format
            img.load()
            _save(img, tmp_path, image_format, quality)
        if tmp_path.stat().st_size < path.stat().st_size:
            tmp_path.replace(path)
        else:
            tmp_path.unlink()
        return True
    except (OSError, ValueError) as e:
        logger.warning(f"Image optimization failed for {path}: {e}")
        if tmp_path.exists():
            tmp_path.unlink()
        return False


def create_thumbnail(
    source: Path, destination: Path, size: int = 300, quality: int = 85
) -> bool:
    """Write a thumbnail that fits within size x size, keeping aspect ratio."""
    try:
        with Image.open(source) as img:
            image_format = img.format
            img.thumbnail((size, size), Image.LANCZOS)
            _save(img, destination, image_format, quality)
        return True
    except (OSError, ValueError) as e:
        logger.warning(f"Thumbnail generation failed for {source}: {e}")
        if destination.exists():
            destination.unlink()
        return False
