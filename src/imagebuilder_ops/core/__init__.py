"""Core Image Builder Operations Module."""

from .models import (
    ImageConfig,
    ImageInfo,
    ImageTestsConfiguration,
    OutputResources,
    ContainerRecipeConfig,
    ContainerRecipeInfo,
    IgnoreTagsConfig,
    KeyValueTags,
)

__all__ = [
    "ImageConfig",
    "ImageInfo",
    "ImageTestsConfiguration",
    "OutputResources",
    "ContainerRecipeConfig",
    "ContainerRecipeInfo",
    "IgnoreTagsConfig",
    "KeyValueTags",
]
