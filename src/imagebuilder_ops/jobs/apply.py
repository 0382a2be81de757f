#!/usr/bin/env python3
"""
Plan, apply and destroy jobs.

Reconciles the resources listed in a definitions file with the state file:
missing resources are created, force-new changes replace, tag changes update
in place and resources dropped from the definitions are deleted.
"""

from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

from .base import BaseJob
from imagebuilder_ops.core.resources import ChangeType, ResourceChange
from imagebuilder_ops.core.state import StateStore, load_definitions
from imagebuilder_ops.utils.exceptions import (
    ImageBuilderOpsError,
    ResourceValidationError,
    UnexpectedStateError,
    WaiterTimeoutError,
)


class PlanJob(BaseJob):
    """Job to compute the changes needed to reach the definitions"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name=kwargs.pop("job_name", "plan"), **kwargs)

    def refresh(self, state: StateStore) -> List[str]:
        """Re-read every resource in state; drop the ones that are gone."""
        removed = []
        for name in state.names():
            entry = state.get(name)
            resource = self.get_resource(entry["type"])
            attributes = resource.read(entry["id"], prior=entry.get("attributes"))
            if attributes is None:
                state.remove(name)
                removed.append(name)
            else:
                state.set(name, entry["type"], attributes, tainted=state.is_tainted(name))
        return removed

    def build_plan(
        self, definitions, state: StateStore
    ) -> Tuple[List[ResourceChange], List[str]]:
        """Return planned changes and validation errors."""
        changes: List[ResourceChange] = []
        errors: List[str] = []

        for definition in definitions:
            resource = self.get_resource(definition.type)
            try:
                config = resource.validate(definition.name, definition.properties)
            except ResourceValidationError as e:
                errors.extend(f"{definition.name}: {message}" for message in e.errors)
                continue

            entry = state.get(definition.name)
            if entry and (entry["type"] != definition.type or entry.get("tainted")):
                change = ResourceChange(
                    definition.name,
                    definition.type,
                    ChangeType.REPLACE,
                    config,
                    entry.get("attributes"),
                    ["tainted"] if entry.get("tainted") else ["type"],
                )
            else:
                change = resource.plan(definition.name, config, state.get_attributes(definition.name))
            change.timeout_minutes = definition.timeout_minutes
            changes.append(change)

        defined = {d.name for d in definitions}
        for name in state.names():
            if name not in defined:
                entry = state.get(name)
                changes.append(
                    ResourceChange(name, entry["type"], ChangeType.DELETE, None, entry.get("attributes"))
                )
        return changes, errors

    def summarize(self, changes: List[ResourceChange]) -> Dict[str, int]:
        counts = Counter(c.change_type.value for c in changes)
        return {t.value: counts.get(t.value, 0) for t in ChangeType}

    def execute(
        self, definitions_path: str, state_path: Optional[str] = None, refresh: bool = True, **kwargs
    ) -> Dict[str, Any]:
        """Plan changes without touching AWS resources or the state file"""
        try:
            definitions = load_definitions(definitions_path)
            state = StateStore(self.resolve_state_path(state_path))
            if refresh:
                self.refresh(state)
            changes, errors = self.build_plan(definitions, state)
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to plan: {e}")

        if errors:
            return self.error(f"Invalid resource definitions ({len(errors)} errors)", errors=errors)

        summary = self.summarize(changes)
        self.log(f"Plan: {summary}")
        return {
            "status": "success",
            "message": self._describe(summary),
            "correlation_id": self.correlation_id,
            "summary": summary,
            "changes": [c.to_dict() for c in changes],
        }

    @staticmethod
    def _describe(summary: Dict[str, int]) -> str:
        return (
            f"Plan: {summary['create']} to create, {summary['replace']} to replace, "
            f"{summary['update']} to update, {summary['delete']} to delete"
        )


class ApplyJob(PlanJob):
    """Job to apply planned changes"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="apply", **kwargs)

    def execute(
        self,
        definitions_path: str,
        state_path: Optional[str] = None,
        dry_run: bool = False,
        **kwargs,
    ) -> Dict[str, Any]:
        """Apply resource definitions"""
        if dry_run:
            result = super().execute(definitions_path, state_path)
            if result["status"] == "success":
                result["message"] = f"DRY RUN: {result['message']}"
            return result

        try:
            definitions = load_definitions(definitions_path)
            state = StateStore(self.resolve_state_path(state_path))
            removed = self.refresh(state)
            if removed:
                state.save()
                self.log(f"Removed vanished resources from state: {removed}", "warning")
            changes, errors = self.build_plan(definitions, state)
        except ImageBuilderOpsError as e:
            return self.error(f"Failed to plan: {e}")

        if errors:
            return self.error(f"Invalid resource definitions ({len(errors)} errors)", errors=errors)

        applied = []
        for change in changes:
            if change.change_type == ChangeType.NO_CHANGE:
                continue
            try:
                self._apply_change(change, state)
            except ImageBuilderOpsError as e:
                return self.error(
                    f"Failed to {change.change_type.value} {change.name}: {e}",
                    applied=applied,
                    summary=self.summarize(changes),
                )
            applied.append(change.to_dict())

        summary = self.summarize(changes)
        return {
            "status": "success",
            "message": (
                f"Apply complete: {summary['create']} created, {summary['replace']} replaced, "
                f"{summary['update']} updated, {summary['delete']} deleted"
            ),
            "correlation_id": self.correlation_id,
            "summary": summary,
            "applied": applied,
        }

    def _apply_change(self, change: ResourceChange, state: StateStore) -> None:
        """Execute one change, saving state as soon as AWS has changed."""
        self.log(f"{change.change_type.value}: {change.type} {change.name}")

        if change.change_type in (ChangeType.DELETE, ChangeType.REPLACE):
            entry = state.get(change.name)
            self.get_resource(entry["type"]).delete(entry["id"])
            state.remove(change.name)
            state.save()
            if change.change_type == ChangeType.DELETE:
                return

        resource = self.get_resource(change.type)
        if change.change_type == ChangeType.UPDATE:
            attributes = resource.update(
                change.resource_id,
                change.prior.get("tags"),
                change.config.tags,
                prior=change.prior,
            )
            if attributes is None:
                state.remove(change.name)
            else:
                state.set(change.name, change.type, attributes)
            state.save()
            return

        try:
            attributes = resource.create(change.config, change.timeout_minutes)
        except (UnexpectedStateError, WaiterTimeoutError) as e:
            # The resource exists but never became usable
            state.set(change.name, change.type, {"arn": e.arn}, tainted=True)
            state.save()
            self.log(f"{change.name} ({e.arn}) marked tainted: {e}", "warning")
            raise
        state.set(change.name, change.type, attributes)
        state.save()
        self.log(f"Created {change.type} {change.name}: {attributes.get('arn')}")


class DestroyJob(BaseJob):
    """Job to delete every resource recorded in state"""

    def __init__(self, config_manager=None, **kwargs):
        super().__init__(config_manager, job_name="destroy", **kwargs)

    def execute(self, state_path: Optional[str] = None, dry_run: bool = False, **kwargs) -> Dict[str, Any]:
        state = StateStore(self.resolve_state_path(state_path))
        names = state.names()

        if dry_run:
            return {
                "status": "success",
                "message": f"DRY RUN: Would destroy {len(names)} resources",
                "resources": names,
            }

        destroyed = []
        for name in names:
            entry = state.get(name)
            try:
                self.get_resource(entry["type"]).delete(entry["id"])
            except ImageBuilderOpsError as e:
                return self.error(f"Failed to destroy {name}: {e}", destroyed=destroyed)
            state.remove(name)
            state.save()
            destroyed.append(name)
            self.log(f"Destroyed {entry['type']} {name} ({entry['id']})")

        return {
            "status": "success",
            "message": f"Destroy complete: {len(destroyed)} resources destroyed",
            "correlation_id": self.correlation_id,
            "destroyed": destroyed,
        }
