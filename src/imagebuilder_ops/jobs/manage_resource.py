#!/usr/bin/env python3
"""Single-resource jobs: show, delete, tag and import by ARN."""

from typing import Any, Dict, List, Optional

from .base import BaseJob
from imagebuilder_ops.core.models.tags import KeyValueTags
from imagebuilder_ops.core.state import StateStore
from imagebuilder_ops.utils.exceptions import ImageBuilderOpsError, ResourceNotFoundError


class ShowResourceJob(BaseJob):
    """Job to read one resource"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="show_resource", **kwargs)

    def execute(self, type_name: str, arn: str, **kwargs) -> Dict[str, Any]:
        try:
            attributes = self.get_resource(type_name).read(arn)
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to read {arn}: {e}")

        if attributes is None:
            return self.error(f"{type_name} {arn} not found")
        return {"status": "success", "message": f"Found {type_name} {arn}", "resource": attributes}


class DeleteResourceJob(BaseJob):
    """Job to delete one resource"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="delete_resource", **kwargs)

    def execute(self, type_name: str, arn: str, dry_run: bool = False, **kwargs) -> Dict[str, Any]:
        if dry_run:
            return {"status": "success", "message": f"DRY RUN: Would delete {type_name} {arn}"}
        try:
            self.get_resource(type_name).delete(arn)
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to delete {arn}: {e}")

        self.log(f"Deleted {type_name} {arn}")
        return {"status": "success", "message": f"Deleted {type_name} {arn}"}


class TagResourceJob(BaseJob):
    """Job to add, change or remove tags on one resource"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="tag_resource", **kwargs)

    def execute(
        self,
        type_name: str,
        arn: str,
        set_tags: Optional[Dict[str, str]] = None,
        unset_keys: Optional[List[str]] = None,
        dry_run: bool = False,
        **kwargs,
    ) -> Dict[str, Any]:
        resource = self.get_resource(type_name)
        try:
            current = resource.read(arn)
            if current is None:
                return self.error(f"{type_name} {arn} not found")

            old_tags = current.get("tags") or {}
            new_tags = {k: v for k, v in old_tags.items() if k not in set(unset_keys or [])}
            new_tags.update(KeyValueTags.new(set_tags).map())

            old = KeyValueTags.new(old_tags)
            new = KeyValueTags.new(new_tags)
            changes = {"removed": old.removed(new), "updated": old.updated(new)}

            if dry_run:
                return {
                    "status": "success",
                    "message": f"DRY RUN: Would update tags on {arn}",
                    **changes,
                }

            attributes = resource.update(arn, old_tags, new_tags)
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to update tags on {arn}: {e}")

        return {
            "status": "success",
            "message": f"Updated tags on {arn}",
            "tags": (attributes or {}).get("tags", {}),
            **changes,
        }


class ImportResourceJob(BaseJob):
    """Job to adopt an existing resource into the state file"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="import_resource", **kwargs)

    def execute(
        self, type_name: str, name: str, arn: str, state_path: Optional[str] = None, **kwargs
    ) -> Dict[str, Any]:
        state = StateStore(self.resolve_state_path(state_path))
        if state.get(name) is not None:
            return self.error(f"Resource {name} is already managed ({state.get(name)['id']})")

        try:
            attributes = self.get_resource(type_name).import_state(arn)
        except ResourceNotFoundError:
            return self.error(f"Cannot import non-existent {type_name} {arn}")
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to import {arn}: {e}")

        state.set(name, type_name, attributes)
        state.save()
        self.log(f"Imported {type_name} {arn} as {name}")
        return {"status": "success", "message": f"Imported {arn} as {name}", "resource": attributes}
