"""Image Builder resource types."""

from typing import Dict, Optional, Type

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig
from .base import BaseResource, ChangeType, ResourceChange
from .container_recipe import ContainerRecipeResource
from .image import ImageResource

# Centralized resource registry
RESOURCE_TYPES: Dict[str, Type[BaseResource]] = {
    ImageResource.type_name: ImageResource,
    ContainerRecipeResource.type_name: ContainerRecipeResource,
}


def get_resource(
    type_name: str,
    manager: ImageBuilderManager,
    ignore_tags: Optional[IgnoreTagsConfig] = None,
    **options,
) -> BaseResource:
    """Instantiate the resource handler for ``type_name``, passing ``options`` to its constructor."""
    try:
        resource_class = RESOURCE_TYPES[type_name]
    except KeyError:
        raise ValueError(
            f"Unknown resource type: {type_name}. Supported types: {sorted(RESOURCE_TYPES)}"
        ) from None
    return resource_class(manager, ignore_tags, **options)


__all__ = [
    "BaseResource",
    "ChangeType",
    "ResourceChange",
    "ImageResource",
    "ContainerRecipeResource",
    "RESOURCE_TYPES",
    "get_resource",
]
