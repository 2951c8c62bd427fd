"""Deterministic image URL construction with placeholder fallback."""

import enum
import re
from typing import Optional
from urllib.parse import urlencode

from heritage_content.config import get_settings
from heritage_content.errors import ValidationError

settings = get_settings()

ABSOLUTE_URL = re.compile(r"^https?://", re.IGNORECASE)

SUPPORTED_FORMATS = ("webp", "jpg", "png")
DEFAULT_SRCSET_WIDTHS = (320, 640, 960, 1280, 1920)


class ImageVariant(str, enum.Enum):
    THUMBNAIL = "thumbnail"
    FULL = "full"


# Path segment per variant; distinct so variants never collide
VARIANT_PATHS = {
    ImageVariant.THUMBNAIL: "thumbnails",
    ImageVariant.FULL: "images",
}


class ImageResolver:
    """Builds CDN URLs for image variants."""

    def __init__(
        self,
        cdn_base_url: Optional[str] = None,
        placeholder_image_url: Optional[str] = None,
        default_quality: Optional[int] = None,
    ):
        self._cdn_base_url = (cdn_base_url or settings.cdn_base_url).rstrip("/")
        self._placeholder = placeholder_image_url or settings.placeholder_image_url
        self._default_quality = default_quality or settings.image_default_quality

        for url in (self._cdn_base_url, self._placeholder):
            if not ABSOLUTE_URL.match(url):
                raise ValueError(f"Image URLs must be absolute http(s) URLs, got {url!r}")

    def get_placeholder_image_url(self) -> str:
        return self._placeholder

    def get_image_url(
        self,
        image_id: Optional[str],
        variant: ImageVariant | str = ImageVariant.FULL,
        width: Optional[int] = None,
        quality: Optional[int] = None,
        format: Optional[str] = None,
    ) -> str:
        """
        Get the URL of an image variant.

        Empty ids resolve to the placeholder regardless of variant.
        Optimization options are appended as ``w``, ``q`` and ``fm`` query
        parameters; unsupported formats are ignored.
        """
        if not image_id:
            return self._placeholder

        try:
            variant = ImageVariant(variant)
        except ValueError:
            raise ValidationError(f"Unknown image variant: {variant}", field="variant")

        url = f"{self._cdn_base_url}/{VARIANT_PATHS[variant]}/{image_id}"

        params = {}
        if width:
            params["w"] = str(width)
        if quality:
            params["q"] = str(quality)
        if format and format in SUPPORTED_FORMATS:
            params["fm"] = format
        if params:
            url += f"?{urlencode(params)}"

        return url

    def resolve_stored_url(self, raw_url: Optional[str]) -> str:
        """
        Turn a stored url column into an absolute URL.

        Null or blank values become the placeholder; relative storage paths
        are served from the CDN.
        """
        if not raw_url or not raw_url.strip():
            return self._placeholder
        raw_url = raw_url.strip()
        if ABSOLUTE_URL.match(raw_url):
            return raw_url
        return f"{self._cdn_base_url}/{raw_url.lstrip('/')}"

    def generate_srcset(
        self,
        image_id: Optional[str],
        variant: ImageVariant | str = ImageVariant.FULL,
        widths: tuple[int, ...] = DEFAULT_SRCSET_WIDTHS,
    ) -> str:
        """Responsive ``srcset`` value with one webp URL per width."""
        return ", ".join(
            f"{self.get_image_url(image_id, variant, width=w, quality=self._default_quality, format='webp')} {w}w"
            for w in widths
        )

    @staticmethod
    def cache_headers() -> dict[str, str]:
        """CDN cache headers for image responses."""
        return {
            "Cache-Control": "public, max-age=31536000, immutable",
            "CDN-Cache-Control": "public, max-age=31536000",
            "Vary": "Accept",
        }


# Singleton instance
image_resolver = ImageResolver()
