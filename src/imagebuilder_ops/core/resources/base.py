"""Base resource interface for Image Builder resource types."""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.aws.tags import update_tags
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig, KeyValueTags
from imagebuilder_ops.utils.exceptions import ResourceNotFoundError
from imagebuilder_ops.utils.logger import setup_logger


class ChangeType(Enum):
    """Type of change planned for a resource."""
    CREATE = "create"
    REPLACE = "replace"
    UPDATE = "update"
    DELETE = "delete"
    NO_CHANGE = "no_change"


@dataclass
class ResourceChange:
    """Planned change for one resource block."""
    name: str
    type: str
    change_type: ChangeType
    config: Any = None
    prior: Optional[Dict[str, Any]] = None
    changed_fields: List[str] = field(default_factory=list)
    timeout_minutes: Optional[int] = None

    @property
    def resource_id(self) -> Optional[str]:
        return (self.prior or {}).get("arn")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "action": self.change_type.value,
            "id": self.resource_id,
            "changed_fields": list(self.changed_fields),
        }


def unique_client_token() -> str:
    """Idempotency token for create requests."""
    return str(uuid.uuid4())


class BaseResource(ABC):
    """Lifecycle callbacks for one Image Builder resource type.

    Subclasses provide expand (create request), flatten (read response) and
    the API calls; tag updates, import and planning are shared.
    """

    type_name: str = ""
    config_class: Any = None

    def __init__(self, manager: ImageBuilderManager, ignore_tags: Optional[IgnoreTagsConfig] = None):
        self.manager = manager
        self.ignore_tags = ignore_tags or IgnoreTagsConfig()
        self.logger = setup_logger(self.__class__.__module__, "resources.log")

    def validate(self, name: str, properties: Dict[str, Any]) -> Any:
        """Parse a resource block into its config model."""
        return self.config_class.from_config(name, properties or {})

    @abstractmethod
    def create(self, config: Any, timeout_minutes: Optional[int] = None) -> Dict[str, Any]:
        """Create the resource and return its state attributes."""
        pass

    @abstractmethod
    def _get(self, arn: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    def _flatten(self, payload: Dict[str, Any], prior: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def delete(self, arn: str) -> None:
        pass

    def read(
        self, arn: str, is_new: bool = False, prior: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """Refresh state attributes; None when an existing resource has gone."""
        try:
            payload = self._get(arn)
        except ResourceNotFoundError:
            if is_new:
                raise
            self.logger.warning(f"{self.type_name} ({arn}) not found, removing from state")
            return None
        return self._flatten(payload, prior)

    def update(
        self,
        arn: str,
        old_tags: Optional[Dict[str, Any]],
        new_tags: Optional[Dict[str, Any]],
        prior: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Apply tag changes (the only updatable field) and refresh."""
        if KeyValueTags.new(old_tags).map() != KeyValueTags.new(new_tags).map():
            self.logger.info(f"Updating tags for {self.type_name} ({arn})")
            update_tags(self.manager, arn, old_tags, new_tags)
        return self.read(arn, prior=prior)

    def import_state(self, arn: str) -> Dict[str, Any]:
        """Adopt an existing resource by ARN."""
        return self.read(arn, is_new=True)

    def plan(
        self, name: str, config: Any, prior: Optional[Dict[str, Any]]
    ) -> ResourceChange:
        """Compare desired config against recorded state."""
        if prior is None:
            return ResourceChange(name, self.type_name, ChangeType.CREATE, config, None)

        desired = config.to_dict()
        changed = []
        for key in self.config_class.FORCE_NEW:
            if key in self.config_class.OPTIONAL_COMPUTED and desired.get(key) is None:
                continue
            if desired.get(key) != prior.get(key):
                changed.append(key)
        if changed:
            return ResourceChange(name, self.type_name, ChangeType.REPLACE, config, prior, changed)

        desired_tags = KeyValueTags.new(desired.get("tags")).ignore_aws().ignore_config(self.ignore_tags)
        if desired_tags.map() != KeyValueTags.new(prior.get("tags")).map():
            return ResourceChange(name, self.type_name, ChangeType.UPDATE, config, prior, ["tags"])

        return ResourceChange(name, self.type_name, ChangeType.NO_CHANGE, config, prior)
