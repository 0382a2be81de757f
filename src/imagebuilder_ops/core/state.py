#!/usr/bin/env python3
"""Resource definition and state files.

Definitions list the desired resources; the state file records, per logical
name, the resource type, its ARN and the last attributes read from AWS.
"""

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from imagebuilder_ops.core.resources import RESOURCE_TYPES
from imagebuilder_ops.utils.exceptions import CLIError
from imagebuilder_ops.utils.logger import setup_logger

logger = setup_logger(__name__, "state.log")

STATE_VERSION = 1


@dataclass
class ResourceDefinition:
    """One resource block from a definitions file."""
    type: str
    name: str
    properties: Dict[str, Any] = field(default_factory=dict)
    timeout_minutes: Optional[int] = None


def load_definitions(path: Path) -> List[ResourceDefinition]:
    """Load resource blocks from a YAML definitions file."""
    path = Path(path)
    if not path.exists():
        raise CLIError(f"Definitions file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise CLIError(f"Invalid YAML in {path}: {e}") from e

    blocks = content.get("resources") if isinstance(content, dict) else None
    if not isinstance(blocks, list):
        raise CLIError(f"{path}: expected a top-level 'resources' list")

    definitions = []
    seen = set()
    for index, block in enumerate(blocks):
        if not isinstance(block, dict):
            raise CLIError(f"{path}: resources[{index}] must be a mapping")
        type_name = block.get("type")
        name = block.get("name")
        if type_name not in RESOURCE_TYPES:
            raise CLIError(
                f"{path}: resources[{index}] has unknown type {type_name!r}. "
                f"Supported types: {sorted(RESOURCE_TYPES)}"
            )
        if not name:
            raise CLIError(f"{path}: resources[{index}] is missing a name")
        if name in seen:
            raise CLIError(f"{path}: duplicate resource name {name!r}")
        seen.add(name)

        properties = block.get("properties") or {}
        if not isinstance(properties, dict):
            raise CLIError(f"{path}: resources[{index}] properties must be a mapping")
        timeouts = block.get("timeouts") or {}
        if not isinstance(timeouts, dict):
            raise CLIError(f"{path}: resources[{index}] timeouts must be a mapping")
        timeout = timeouts.get("create")
        # bool is an int subclass
        if timeout is not None and (
            isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0
        ):
            raise CLIError(
                f"{path}: resources[{index}] timeouts.create must be a positive "
                f"number of minutes, got {timeout!r}"
            )

        definitions.append(
            ResourceDefinition(
                type=type_name,
                name=name,
                properties=properties,
                timeout_minutes=timeout,
            )
        )
    return definitions


class StateStore:
    """YAML-backed record of managed resources."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.resources: Dict[str, Dict[str, Any]] = {}
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            self.resources = {}
            return
        with open(self.path, "r", encoding="utf-8") as f:
            content = yaml.safe_load(f) or {}
        self.resources = dict(content.get("resources") or {})
        logger.debug(f"Loaded {len(self.resources)} resources from {self.path}")

    def save(self) -> None:
        """Write the state file atomically."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = {"version": STATE_VERSION, "resources": self.resources}
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(content, f, default_flow_style=False, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self.resources.get(name)

    def get_attributes(self, name: str) -> Optional[Dict[str, Any]]:
        entry = self.get(name)
        return entry.get("attributes") if entry else None

    def set(
        self, name: str, type_name: str, attributes: Dict[str, Any], tainted: bool = False
    ) -> None:
        """Record a resource; tainted ones are replaced on the next apply."""
        entry = {
            "type": type_name,
            "id": attributes.get("arn"),
            "attributes": attributes,
        }
        if tainted:
            entry["tainted"] = True
        self.resources[name] = entry

    def is_tainted(self, name: str) -> bool:
        return bool((self.get(name) or {}).get("tainted"))

    def remove(self, name: str) -> None:
        self.resources.pop(name, None)

    def names(self) -> List[str]:
        return sorted(self.resources)
