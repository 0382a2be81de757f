"""Simple Image Builder Manager for AWS operations."""

from typing import Dict, List, Any
import boto3
from botocore.exceptions import ClientError
from imagebuilder_ops.core.constants import DEFAULT_AWS_REGION, RESOURCE_NOT_FOUND_CODE
from imagebuilder_ops.utils.exceptions import (
    EmptyResponseError,
    ImageBuilderApiError,
    ResourceNotFoundError,
)
from imagebuilder_ops.utils.logger import setup_logger


class ImageBuilderManager:
    """Simple AWS Image Builder API wrapper.

    ResourceNotFoundException is raised as ResourceNotFoundError, every other
    ClientError as ImageBuilderApiError.
    """

    def __init__(self, session: boto3.Session, region: str = DEFAULT_AWS_REGION, client=None):
        """Initialize ImageBuilderManager."""
        self.session = session
        self.region = region
        self.client = client or session.client("imagebuilder", region_name=region)
        self.logger = setup_logger(__name__, "imagebuilder_manager.log")

    def _call(self, operation: str, arn: str = "", **params) -> Dict[str, Any]:
        try:
            response = getattr(self.client, operation)(**params)
        except ClientError as e:
            error = e.response.get("Error", {})
            code = error.get("Code", "Unknown")
            if code == RESOURCE_NOT_FOUND_CODE:
                raise ResourceNotFoundError(arn, operation) from e
            self.logger.error(f"Error calling {operation} ({arn or 'new resource'}): {e}")
            raise ImageBuilderApiError(operation, code, error.get("Message", str(e))) from e
        if response is None:
            raise EmptyResponseError(f"{operation} returned an empty response")
        return response

    # Images

    def create_image(self, params: Dict[str, Any]) -> str:
        """Start an image build and return its image build version ARN."""
        response = self._call("create_image", **params)
        arn = response.get("imageBuildVersionArn")
        if not arn:
            raise EmptyResponseError("create_image returned no imageBuildVersionArn")
        self.logger.info(f"Started image build {arn}")
        return arn

    def get_image(self, arn: str) -> Dict[str, Any]:
        response = self._call("get_image", arn, imageBuildVersionArn=arn)
        image = response.get("image")
        if not image:
            raise EmptyResponseError(f"get_image returned no image for {arn}")
        return image

    def delete_image(self, arn: str) -> None:
        self._call("delete_image", arn, imageBuildVersionArn=arn)
        self.logger.info(f"Deleted image {arn}")

    # Container recipes

    def create_container_recipe(self, params: Dict[str, Any]) -> str:
        """Create a container recipe and return its ARN."""
        response = self._call("create_container_recipe", **params)
        arn = response.get("containerRecipeArn")
        if not arn:
            raise EmptyResponseError("create_container_recipe returned no containerRecipeArn")
        self.logger.info(f"Created container recipe {arn}")
        return arn

    def get_container_recipe(self, arn: str) -> Dict[str, Any]:
        response = self._call("get_container_recipe", arn, containerRecipeArn=arn)
        recipe = response.get("containerRecipe")
        if not recipe:
            raise EmptyResponseError(f"get_container_recipe returned no recipe for {arn}")
        return recipe

    def delete_container_recipe(self, arn: str) -> None:
        self._call("delete_container_recipe", arn, containerRecipeArn=arn)
        self.logger.info(f"Deleted container recipe {arn}")

    # Tags

    def tag_resource(self, arn: str, tags: Dict[str, str]) -> None:
        self._call("tag_resource", arn, resourceArn=arn, tags=tags)
        self.logger.info(f"Tagged {arn}: {sorted(tags)}")

    def untag_resource(self, arn: str, tag_keys: List[str]) -> None:
        self._call("untag_resource", arn, resourceArn=arn, tagKeys=tag_keys)
        self.logger.info(f"Untagged {arn}: {tag_keys}")


def create_imagebuilder_manager(
    session: boto3.Session, region: str = DEFAULT_AWS_REGION
) -> ImageBuilderManager:
    """Create ImageBuilderManager instance."""
    return ImageBuilderManager(session, region)
