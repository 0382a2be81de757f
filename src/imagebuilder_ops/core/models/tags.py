"""Simple data models for Image Builder resource tag management."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from imagebuilder_ops.core.constants import AWS_TAG_PREFIX


@dataclass
class IgnoreTagsConfig:
    """Tag keys and key prefixes that are kept out of resource state."""
    keys: List[str] = field(default_factory=list)
    key_prefixes: List[str] = field(default_factory=list)

    def matches(self, key: str) -> bool:
        return key in self.keys or any(key.startswith(p) for p in self.key_prefixes)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Iterable[str]]]) -> "IgnoreTagsConfig":
        data = data or {}
        return cls(
            keys=list(data.get("keys", []) or []),
            key_prefixes=list(data.get("key_prefixes", []) or []),
        )


@dataclass
class KeyValueTags:
    """Key/value tag set with the filtering and diffing used for reconciliation."""
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def new(cls, tags: Optional[Mapping[str, object]]) -> "KeyValueTags":
        # Values come from YAML, so numbers and booleans are normalised to strings
        return cls({str(k): "" if v is None else str(v) for k, v in (tags or {}).items()})

    def ignore_aws(self) -> "KeyValueTags":
        """Drop system tags (aws: prefix)."""
        return KeyValueTags(
            {k: v for k, v in self.tags.items() if not k.startswith(AWS_TAG_PREFIX)}
        )

    def ignore_config(self, config: Optional[IgnoreTagsConfig]) -> "KeyValueTags":
        if config is None:
            return KeyValueTags(dict(self.tags))
        return KeyValueTags({k: v for k, v in self.tags.items() if not config.matches(k)})

    def removed(self, new: "KeyValueTags") -> List[str]:
        """Keys present here but missing from ``new``."""
        return sorted(k for k in self.tags if k not in new.tags)

    def updated(self, new: "KeyValueTags") -> Dict[str, str]:
        """Pairs in ``new`` that are absent here or carry a different value."""
        return {k: v for k, v in new.tags.items() if self.tags.get(k) != v}

    def map(self) -> Dict[str, str]:
        return dict(self.tags)

    def __len__(self) -> int:
        return len(self.tags)
