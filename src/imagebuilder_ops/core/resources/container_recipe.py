"""aws_imagebuilder_container_recipe resource."""

from typing import Any, Dict, Optional

from imagebuilder_ops.core.constants import CONTAINER_RECIPE_RESOURCE_TYPE
from imagebuilder_ops.core.models.container_recipe import (
    ContainerRecipeConfig,
    ContainerRecipeInfo,
)
from imagebuilder_ops.core.resources.base import BaseResource, unique_client_token
from imagebuilder_ops.utils.exceptions import ResourceNotFoundError


class ContainerRecipeResource(BaseResource):
    type_name = CONTAINER_RECIPE_RESOURCE_TYPE
    config_class = ContainerRecipeConfig

    def create(
        self, config: ContainerRecipeConfig, timeout_minutes: Optional[int] = None
    ) -> Dict[str, Any]:
        arn = self.manager.create_container_recipe(config.to_create_params(unique_client_token()))
        return self.read(arn, is_new=True, prior=config.to_dict())

    def _get(self, arn: str) -> Dict[str, Any]:
        return self.manager.get_container_recipe(arn)

    def _flatten(self, payload: Dict[str, Any], prior: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return ContainerRecipeInfo.from_aws_container_recipe(
            payload, self.ignore_tags, prior
        ).to_state()

    def delete(self, arn: str) -> None:
        try:
            self.manager.delete_container_recipe(arn)
        except ResourceNotFoundError:
            self.logger.info(f"Container recipe {arn} already deleted")
