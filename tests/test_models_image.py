"""Tests for image expand/flatten and validation."""

import pytest

from imagebuilder_ops.core.models.image import ImageConfig, ImageInfo
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig
from imagebuilder_ops.utils.exceptions import ResourceValidationError

from conftest import (
    CONTAINER_RECIPE_ARN,
    DIST_ARN,
    IMAGE_ARN,
    IMAGE_RECIPE_ARN,
    INFRA_ARN,
    image_payload,
)


class TestImageConfigValidation:
    def test_minimal_config_uses_defaults(self):
        config = ImageConfig.from_config("img", {"infrastructure_configuration_arn": INFRA_ARN})
        assert config.enhanced_image_metadata_enabled is True
        assert config.image_tests_configuration is None
        assert config.tags == {}

    def test_missing_infrastructure_configuration(self):
        with pytest.raises(ResourceValidationError) as exc:
            ImageConfig.from_config("img", {"image_recipe_arn": IMAGE_RECIPE_ARN})
        assert any("infrastructure_configuration_arn" in e for e in exc.value.errors)

    @pytest.mark.parametrize(
        "key,value",
        [
            ("image_recipe_arn", CONTAINER_RECIPE_ARN),
            ("container_recipe_arn", IMAGE_RECIPE_ARN),
            ("distribution_configuration_arn", INFRA_ARN),
            ("infrastructure_configuration_arn", "arn:aws:imagebuilder:us-east-1:123:infrastructure-configuration/x"),
        ],
    )
    def test_invalid_arns(self, key, value):
        properties = {"infrastructure_configuration_arn": INFRA_ARN, key: value}
        with pytest.raises(ResourceValidationError) as exc:
            ImageConfig.from_config("img", properties)
        assert any(e.startswith(key) for e in exc.value.errors)

    def test_aws_owned_recipe_arn_is_valid(self):
        arn = "arn:aws:imagebuilder:us-east-1:aws:image-recipe/base-linux/2.0.1"
        config = ImageConfig.from_config(
            "img", {"infrastructure_configuration_arn": INFRA_ARN, "image_recipe_arn": arn}
        )
        assert config.image_recipe_arn == arn

    @pytest.mark.parametrize("timeout", [59, 1441, "720"])
    def test_tests_timeout_out_of_range(self, timeout):
        properties = {
            "infrastructure_configuration_arn": INFRA_ARN,
            "image_tests_configuration": {"timeout_minutes": timeout},
        }
        with pytest.raises(ResourceValidationError, match="timeout_minutes"):
            ImageConfig.from_config("img", properties)

    def test_computed_and_unknown_fields_rejected(self):
        properties = {"infrastructure_configuration_arn": INFRA_ARN, "os_version": "x", "colour": "red"}
        with pytest.raises(ResourceValidationError) as exc:
            ImageConfig.from_config("img", properties)
        assert "colour: unsupported argument" in exc.value.errors
        assert "os_version: value is computed and cannot be set" in exc.value.errors

    def test_partial_tests_block_gets_defaults(self):
        config = ImageConfig.from_config(
            "img",
            {
                "infrastructure_configuration_arn": INFRA_ARN,
                "image_tests_configuration": {"image_tests_enabled": False},
            },
        )
        assert config.image_tests_configuration.image_tests_enabled is False
        assert config.image_tests_configuration.timeout_minutes == 720


class TestImageConfigExpand:
    def test_full_create_params(self):
        config = ImageConfig.from_config(
            "img",
            {
                "infrastructure_configuration_arn": INFRA_ARN,
                "image_recipe_arn": IMAGE_RECIPE_ARN,
                "distribution_configuration_arn": DIST_ARN,
                "enhanced_image_metadata_enabled": False,
                "image_tests_configuration": {"image_tests_enabled": True, "timeout_minutes": 90},
                "tags": {"Team": "platform", "aws:reserved": "x", "Cost": 10},
            },
        )
        params = config.to_create_params("token-1")
        assert params == {
            "clientToken": "token-1",
            "enhancedImageMetadataEnabled": False,
            "infrastructureConfigurationArn": INFRA_ARN,
            "imageRecipeArn": IMAGE_RECIPE_ARN,
            "distributionConfigurationArn": DIST_ARN,
            "imageTestsConfiguration": {"imageTestsEnabled": True, "timeoutMinutes": 90},
            "tags": {"Team": "platform", "Cost": "10"},
        }

    def test_omits_unset_fields(self):
        config = ImageConfig.from_config(
            "img",
            {"infrastructure_configuration_arn": INFRA_ARN, "container_recipe_arn": CONTAINER_RECIPE_ARN},
        )
        params = config.to_create_params("token-2")
        assert "tags" not in params
        assert "imageTestsConfiguration" not in params
        assert "imageRecipeArn" not in params
        assert params["containerRecipeArn"] == CONTAINER_RECIPE_ARN
        assert params["enhancedImageMetadataEnabled"] is True


class TestImageInfoFlatten:
    def test_flattens_image(self):
        info = ImageInfo.from_aws_image(image_payload())
        assert info.arn == IMAGE_ARN
        assert info.image_recipe_arn == IMAGE_RECIPE_ARN
        assert info.infrastructure_configuration_arn == INFRA_ARN
        assert info.container_recipe_arn is None
        assert info.distribution_configuration_arn is None
        assert info.image_tests_configuration.timeout_minutes == 720
        assert info.ami_ids == ["ami-0123456789abcdef0"]
        assert info.output_resources.amis[0].account_id == "123456789012"
        assert info.tags == {"Team": "platform"}
        assert info.is_available

    def test_missing_blocks_are_cleared(self):
        payload = image_payload()
        del payload["imageTestsConfiguration"]
        del payload["outputResources"]
        state = ImageInfo.from_aws_image(payload).to_state()
        assert state["image_tests_configuration"] is None
        assert state["output_resources"] is None

    def test_container_output_image_uris_are_a_set(self):
        payload = image_payload(
            outputResources={
                "containers": [
                    {"region": "ap-southeast-2", "imageUris": ["repo:b", "repo:a", "repo:a"]}
                ]
            }
        )
        state = ImageInfo.from_aws_image(payload).to_state()
        assert state["output_resources"]["amis"] == []
        assert state["output_resources"]["containers"] == [
            {"image_uris": ["repo:a", "repo:b"], "region": "ap-southeast-2"}
        ]

    def test_ignore_tags_config(self):
        payload = image_payload(tags={"Team": "platform", "Owner": "me", "ci:build": "42"})
        info = ImageInfo.from_aws_image(
            payload, IgnoreTagsConfig(keys=["Owner"], key_prefixes=["ci:"])
        )
        assert info.tags == {"Team": "platform"}
