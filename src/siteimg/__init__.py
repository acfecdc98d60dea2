"""siteimg — build-time image optimization cache for static sites."""

from siteimg.optimizer import (
    ImageOptimizer,
    get_optimized_card_image,
    get_optimized_hero_image,
)
from siteimg.sources import is_valid_image_path
from siteimg.types import (
    ImageFormat,
    ImageMetadata,
    OptimizedImage,
    OptimizeRequest,
    ResultKind,
    SrcSet,
)

__all__ = [
    "ImageFormat",
    "ImageMetadata",
    "ImageOptimizer",
    "OptimizeRequest",
    "OptimizedImage",
    "ResultKind",
    "SrcSet",
    "get_optimized_card_image",
    "get_optimized_hero_image",
    "is_valid_image_path",
]
