"""Decode, resize and re-encode raster uploads with Pillow."""

from __future__ import annotations

import io
from typing import BinaryIO

from aws_lambda_powertools import Logger
from PIL import Image, UnidentifiedImageError

from core.config import ServiceConfig
from core.models.errors import ValidationError
from core.utils.constants import (
    ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
    TRANSCODE_FORMAT_EXTENSION_MAP,
)

logger = Logger(UTC=True)


class ImageTranscoder:
    """Resizes images to a fixed box and re-encodes them in their own format.

    The target box is applied as-is (no aspect-ratio preservation), so every
    stored image has exactly ``width x height`` pixels.
    """

    def __init__(self, *, width: int, height: int, jpeg_quality: int) -> None:
        self.size = (width, height)
        self.jpeg_quality = jpeg_quality

    @classmethod
    def from_config(cls, config: ServiceConfig) -> ImageTranscoder:
        return cls(
            width=config.resize_width,
            height=config.resize_height,
            jpeg_quality=config.jpeg_quality,
        )

    def transcode(self, stream: BinaryIO) -> tuple[io.BytesIO, str]:
        """Return the re-encoded image and the extension matching its format.

        Raises:
            ValidationError: If the data is not a decodable PNG, JPEG or WebP image
        """
        try:
            with Image.open(stream) as image:
                image_format = (image.format or "").upper()
                if image_format not in TRANSCODE_FORMAT_EXTENSION_MAP:
                    raise ValidationError(
                        message=f"unsupported image format: {image_format.lower() or 'unknown'}",
                        error_code=ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
                        details={"format": image_format},
                    )

                resized = image.resize(self.size, Image.Resampling.BILINEAR)
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            logger.warning("Upload is not a decodable image", extra={"error": str(exc)})
            raise ValidationError(
                message="Uploaded file is not a valid image",
                error_code=ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
            ) from exc
        except OSError as exc:
            logger.warning("Upload image data is truncated or corrupt", extra={"error": str(exc)})
            raise ValidationError(
                message="Uploaded file is not a valid image",
                error_code=ERROR_CODE_UNSUPPORTED_IMAGE_FORMAT,
            ) from exc

        output = io.BytesIO()
        save_kwargs: dict[str, object] = {"format": image_format}

        if image_format == "JPEG":
            if resized.mode not in ("RGB", "L"):
                resized = resized.convert("RGB")
            save_kwargs["quality"] = self.jpeg_quality

        resized.save(output, **save_kwargs)
        output.seek(0)

        return output, TRANSCODE_FORMAT_EXTENSION_MAP[image_format]
