"""Image Builder Operations Jobs package."""

from .base import BaseJob
from .apply import PlanJob, ApplyJob, DestroyJob
from .manage_resource import (
    ShowResourceJob,
    DeleteResourceJob,
    TagResourceJob,
    ImportResourceJob,
)

__all__ = [
    "BaseJob",
    "PlanJob",
    "ApplyJob",
    "DestroyJob",
    "ShowResourceJob",
    "DeleteResourceJob",
    "TagResourceJob",
    "ImportResourceJob",
]
