"""Tag reconciliation for Image Builder resources."""

from typing import Mapping, Optional

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.models.tags import KeyValueTags


def update_tags(
    manager: ImageBuilderManager,
    arn: str,
    old_tags: Optional[Mapping[str, object]],
    new_tags: Optional[Mapping[str, object]],
) -> None:
    """Bring the tags on ``arn`` from ``old_tags`` to ``new_tags``.

    Removed keys are untagged first, then added or changed pairs are tagged.
    System tags (aws: prefix) are never touched.
    """
    old = KeyValueTags.new(old_tags).ignore_aws()
    new = KeyValueTags.new(new_tags).ignore_aws()

    removed = old.removed(new)
    if removed:
        manager.untag_resource(arn, removed)

    updated = old.updated(new)
    if updated:
        manager.tag_resource(arn, updated)
