"""Simple data models for Image Builder resources."""

# Tag models
from .tags import (
    IgnoreTagsConfig,
    KeyValueTags,
)

# Image models
from .image import (
    Ami,
    Container,
    ImageConfig,
    ImageInfo,
    ImageTestsConfiguration,
    OutputResources,
)

# Container recipe models
from .container_recipe import (
    ComponentConfiguration,
    ContainerRecipeConfig,
    ContainerRecipeInfo,
    TargetContainerRepository,
)

__all__ = [
    # Tag models
    "IgnoreTagsConfig",
    "KeyValueTags",
    # Image models
    "Ami",
    "Container",
    "ImageConfig",
    "ImageInfo",
    "ImageTestsConfiguration",
    "OutputResources",
    # Container recipe models
    "ComponentConfiguration",
    "ContainerRecipeConfig",
    "ContainerRecipeInfo",
    "TargetContainerRepository",
]
