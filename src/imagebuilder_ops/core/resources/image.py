"""aws_imagebuilder_image resource."""

from typing import Any, Dict, Optional

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.aws.waiter import image_status_available
from imagebuilder_ops.core.constants import (
    DEFAULT_IMAGE_CREATE_TIMEOUT_MINUTES,
    IMAGE_RESOURCE_TYPE,
)
from imagebuilder_ops.core.models.image import ImageConfig, ImageInfo
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig
from imagebuilder_ops.core.resources.base import BaseResource, unique_client_token
from imagebuilder_ops.utils.exceptions import ResourceNotFoundError


class ImageResource(BaseResource):
    """Image build: created by CreateImage, then waited on until AVAILABLE."""

    type_name = IMAGE_RESOURCE_TYPE
    config_class = ImageConfig

    def __init__(
        self,
        manager: ImageBuilderManager,
        ignore_tags: Optional[IgnoreTagsConfig] = None,
        create_timeout_minutes: int = DEFAULT_IMAGE_CREATE_TIMEOUT_MINUTES,
        waiter_options: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(manager, ignore_tags)
        self.create_timeout_minutes = create_timeout_minutes
        self.waiter_options = waiter_options or {}

    def create(self, config: ImageConfig, timeout_minutes: Optional[int] = None) -> Dict[str, Any]:
        params = config.to_create_params(unique_client_token())
        arn = self.manager.create_image(params)

        timeout = (timeout_minutes or self.create_timeout_minutes) * 60
        self.logger.info(f"Waiting up to {timeout // 60} minutes for image {arn} to become available")
        image_status_available(self.manager, arn, timeout, **self.waiter_options)

        return self.read(arn, is_new=True)

    def _get(self, arn: str) -> Dict[str, Any]:
        return self.manager.get_image(arn)

    def _flatten(self, payload: Dict[str, Any], prior: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return ImageInfo.from_aws_image(payload, self.ignore_tags).to_state()

    def delete(self, arn: str) -> None:
        try:
            self.manager.delete_image(arn)
        except ResourceNotFoundError:
            self.logger.info(f"Image {arn} already deleted")
