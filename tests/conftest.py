"""Shared fixtures for Image Builder Ops tests."""

from unittest.mock import MagicMock

import pytest
import yaml
from botocore.exceptions import ClientError

from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.utils.config import ConfigManager

ACCOUNT = "123456789012"
REGION = "ap-southeast-2"
INFRA_ARN = f"arn:aws:imagebuilder:{REGION}:{ACCOUNT}:infrastructure-configuration/app-infra"
DIST_ARN = f"arn:aws:imagebuilder:{REGION}:{ACCOUNT}:distribution-configuration/app-dist"
IMAGE_RECIPE_ARN = f"arn:aws:imagebuilder:{REGION}:{ACCOUNT}:image-recipe/app-recipe/1.0.0"
CONTAINER_RECIPE_ARN = f"arn:aws:imagebuilder:{REGION}:{ACCOUNT}:container-recipe/app-recipe/1.0.0"
IMAGE_ARN = f"arn:aws:imagebuilder:{REGION}:{ACCOUNT}:image/app-recipe/1.0.0/1"
COMPONENT_ARN = f"arn:aws:imagebuilder:{REGION}:aws:component/update-linux/1.0.2/1"


def client_error(code: str, operation: str = "GetImage", message: str = "boom") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def not_found(operation: str = "GetImage") -> ClientError:
    return client_error("ResourceNotFoundException", operation, "Resource not found")


def image_payload(status: str = "AVAILABLE", **overrides):
    image = {
        "arn": IMAGE_ARN,
        "name": "app-recipe",
        "version": "1.0.0/1",
        "platform": "Linux",
        "osVersion": "Amazon Linux 2",
        "enhancedImageMetadataEnabled": True,
        "state": {"status": status},
        "imageRecipe": {"arn": IMAGE_RECIPE_ARN},
        "infrastructureConfiguration": {"arn": INFRA_ARN},
        "imageTestsConfiguration": {"imageTestsEnabled": True, "timeoutMinutes": 720},
        "dateCreated": "2024-01-01T00:00:00.000Z",
        "outputResources": {
            "amis": [
                {
                    "region": REGION,
                    "image": "ami-0123456789abcdef0",
                    "name": "app-recipe 2024-01-01",
                    "description": "built by image builder",
                    "accountId": ACCOUNT,
                }
            ]
        },
        "tags": {"Team": "platform", "aws:cloudformation:stack-name": "stack"},
    }
    image.update(overrides)
    return image


def container_recipe_payload(**overrides):
    recipe = {
        "arn": CONTAINER_RECIPE_ARN,
        "containerType": "DOCKER",
        "name": "app-recipe",
        "platform": "Linux",
        "owner": ACCOUNT,
        "version": "1.0.0",
        "components": [{"componentArn": COMPONENT_ARN}],
        "dockerfileTemplateData": "FROM {{{ imagebuilder:parentImage }}}",
        "encrypted": True,
        "parentImage": "amazonlinux:latest",
        "dateCreated": "2024-01-01T00:00:00.000Z",
        "tags": {"Team": "platform"},
        "targetRepository": {"service": "ECR", "repositoryName": "app"},
    }
    recipe.update(overrides)
    return recipe


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def manager(client):
    return ImageBuilderManager(MagicMock(), REGION, client=client)


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "configs"
    directory.mkdir()
    settings = {
        "aws": {"region": REGION},
        "ignore_tags": {"keys": [], "key_prefixes": []},
        "waiter": {"poll_interval_seconds": 0, "delay_seconds": 0, "not_found_checks": 2},
        "state": {"path": str(tmp_path / "state" / "state.yaml")},
    }
    (directory / "settings.yaml").write_text(yaml.safe_dump(settings), encoding="utf-8")
    return directory


@pytest.fixture
def config_manager(config_dir, monkeypatch):
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("IMAGEBUILDER_OPS_STATE", raising=False)
    return ConfigManager(config_dir)
