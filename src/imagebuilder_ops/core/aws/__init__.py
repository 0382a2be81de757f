"""AWS core modules."""

from .imagebuilder import ImageBuilderManager, create_imagebuilder_manager
from .tags import update_tags
from .waiter import image_status, image_status_available

__all__ = [
    "ImageBuilderManager",
    "create_imagebuilder_manager",
    "update_tags",
    "image_status",
    "image_status_available",
]
