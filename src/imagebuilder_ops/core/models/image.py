"""Simple data models for Image Builder images."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from imagebuilder_ops.core.constants import (
    CONTAINER_RECIPE_ARN_PATTERN,
    DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED,
    DEFAULT_IMAGE_TESTS_ENABLED,
    DEFAULT_IMAGE_TESTS_TIMEOUT_MINUTES,
    DISTRIBUTION_CONFIGURATION_ARN_PATTERN,
    IMAGE_RECIPE_ARN_PATTERN,
    INFRASTRUCTURE_CONFIGURATION_ARN_PATTERN,
    MAX_IMAGE_TESTS_TIMEOUT_MINUTES,
    MIN_IMAGE_TESTS_TIMEOUT_MINUTES,
)
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig, KeyValueTags
from imagebuilder_ops.utils.exceptions import ResourceValidationError, ValidationRules


@dataclass
class ImageTestsConfiguration:
    """Image tests block."""
    image_tests_enabled: bool = DEFAULT_IMAGE_TESTS_ENABLED
    timeout_minutes: int = DEFAULT_IMAGE_TESTS_TIMEOUT_MINUTES

    def to_api(self) -> Dict[str, Any]:
        return {
            "imageTestsEnabled": self.image_tests_enabled,
            "timeoutMinutes": self.timeout_minutes,
        }

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ImageTestsConfiguration":
        return cls(
            image_tests_enabled=data.get("imageTestsEnabled", DEFAULT_IMAGE_TESTS_ENABLED),
            timeout_minutes=data.get("timeoutMinutes", DEFAULT_IMAGE_TESTS_TIMEOUT_MINUTES),
        )


@dataclass
class Ami:
    account_id: str = ""
    description: str = ""
    image: str = ""
    name: str = ""
    region: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Ami":
        return cls(
            account_id=data.get("accountId", ""),
            description=data.get("description", ""),
            image=data.get("image", ""),
            name=data.get("name", ""),
            region=data.get("region", ""),
        )


@dataclass
class Container:
    image_uris: List[str] = field(default_factory=list)
    region: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Container":
        return cls(
            image_uris=sorted(set(data.get("imageUris") or [])),
            region=data.get("region", ""),
        )


@dataclass
class OutputResources:
    """AMIs and container images produced by a build."""
    amis: List[Ami] = field(default_factory=list)
    containers: List[Container] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "OutputResources":
        return cls(
            amis=[Ami.from_api(a) for a in data.get("amis") or [] if a],
            containers=[Container.from_api(c) for c in data.get("containers") or [] if c],
        )


@dataclass
class ImageConfig:
    """Desired configuration of an image build."""
    infrastructure_configuration_arn: str
    container_recipe_arn: Optional[str] = None
    distribution_configuration_arn: Optional[str] = None
    image_recipe_arn: Optional[str] = None
    enhanced_image_metadata_enabled: bool = DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED
    image_tests_configuration: Optional[ImageTestsConfiguration] = None
    tags: Dict[str, str] = field(default_factory=dict)

    CONFIGURABLE = (
        "container_recipe_arn",
        "distribution_configuration_arn",
        "enhanced_image_metadata_enabled",
        "image_recipe_arn",
        "image_tests_configuration",
        "infrastructure_configuration_arn",
        "tags",
    )
    COMPUTED = ("arn", "date_created", "name", "os_version", "output_resources", "platform", "version")
    # Every configurable field except tags requires replacement
    FORCE_NEW = (
        "container_recipe_arn",
        "distribution_configuration_arn",
        "enhanced_image_metadata_enabled",
        "image_recipe_arn",
        "image_tests_configuration",
        "infrastructure_configuration_arn",
    )
    # Filled in by the API when left unset
    OPTIONAL_COMPUTED = ("image_tests_configuration",)

    @staticmethod
    def validate(properties: Dict[str, Any]) -> List[str]:
        errors = ValidationRules.unsupported_arguments(
            properties, ImageConfig.CONFIGURABLE, ImageConfig.COMPUTED
        )
        checks = [
            ("container_recipe_arn", CONTAINER_RECIPE_ARN_PATTERN, "valid container recipe ARN must be provided"),
            ("distribution_configuration_arn", DISTRIBUTION_CONFIGURATION_ARN_PATTERN, "valid distribution configuration ARN must be provided"),
            ("image_recipe_arn", IMAGE_RECIPE_ARN_PATTERN, "valid image recipe ARN must be provided"),
            ("infrastructure_configuration_arn", INFRASTRUCTURE_CONFIGURATION_ARN_PATTERN, "valid infrastructure configuration ARN must be provided"),
        ]
        if not properties.get("infrastructure_configuration_arn"):
            errors.append("infrastructure_configuration_arn: required field is not set")
        for key, pattern, message in checks:
            if properties.get(key) is not None:
                errors.append(ValidationRules.string_match(key, properties[key], pattern, message))

        if "enhanced_image_metadata_enabled" in properties:
            errors.append(
                ValidationRules.is_bool(
                    "enhanced_image_metadata_enabled", properties["enhanced_image_metadata_enabled"]
                )
            )

        tests = properties.get("image_tests_configuration")
        if tests is not None:
            if not isinstance(tests, dict):
                errors.append("image_tests_configuration: expected a single block")
            else:
                errors.extend(
                    ValidationRules.unsupported_arguments(
                        tests, ("image_tests_enabled", "timeout_minutes")
                    )
                )
                if "image_tests_enabled" in tests:
                    errors.append(
                        ValidationRules.is_bool(
                            "image_tests_configuration.image_tests_enabled",
                            tests["image_tests_enabled"],
                        )
                    )
                if "timeout_minutes" in tests:
                    errors.append(
                        ValidationRules.int_between(
                            "image_tests_configuration.timeout_minutes",
                            tests["timeout_minutes"],
                            MIN_IMAGE_TESTS_TIMEOUT_MINUTES,
                            MAX_IMAGE_TESTS_TIMEOUT_MINUTES,
                        )
                    )

        if properties.get("tags") is not None and not isinstance(properties["tags"], dict):
            errors.append("tags: expected a map of strings")
        return [e for e in errors if e]

    @classmethod
    def from_config(cls, name: str, properties: Dict[str, Any]) -> "ImageConfig":
        """Build from a resource block, raising ResourceValidationError on bad input."""
        errors = cls.validate(properties)
        if errors:
            raise ResourceValidationError(name, errors)

        tests = properties.get("image_tests_configuration")
        return cls(
            infrastructure_configuration_arn=properties["infrastructure_configuration_arn"],
            container_recipe_arn=properties.get("container_recipe_arn"),
            distribution_configuration_arn=properties.get("distribution_configuration_arn"),
            image_recipe_arn=properties.get("image_recipe_arn"),
            enhanced_image_metadata_enabled=properties.get(
                "enhanced_image_metadata_enabled", DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED
            ),
            image_tests_configuration=ImageTestsConfiguration(**tests) if tests else None,
            tags=KeyValueTags.new(properties.get("tags")).map(),
        )

    def to_create_params(self, client_token: str) -> Dict[str, Any]:
        """Expand into CreateImage request parameters."""
        params: Dict[str, Any] = {
            "clientToken": client_token,
            "enhancedImageMetadataEnabled": self.enhanced_image_metadata_enabled,
            "infrastructureConfigurationArn": self.infrastructure_configuration_arn,
        }
        if self.container_recipe_arn:
            params["containerRecipeArn"] = self.container_recipe_arn
        if self.distribution_configuration_arn:
            params["distributionConfigurationArn"] = self.distribution_configuration_arn
        if self.image_recipe_arn:
            params["imageRecipeArn"] = self.image_recipe_arn
        if self.image_tests_configuration is not None:
            params["imageTestsConfiguration"] = self.image_tests_configuration.to_api()

        tags = KeyValueTags.new(self.tags).ignore_aws()
        if len(tags) > 0:
            params["tags"] = tags.map()
        return params

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ImageInfo:
    """Flattened state of an image build."""
    arn: str
    infrastructure_configuration_arn: Optional[str] = None
    container_recipe_arn: Optional[str] = None
    distribution_configuration_arn: Optional[str] = None
    image_recipe_arn: Optional[str] = None
    enhanced_image_metadata_enabled: bool = DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED
    image_tests_configuration: Optional[ImageTestsConfiguration] = None
    output_resources: Optional[OutputResources] = None
    date_created: str = ""
    name: str = ""
    os_version: str = ""
    platform: str = ""
    version: str = ""
    status: str = ""
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def is_available(self) -> bool:
        return self.status == "AVAILABLE"

    @property
    def ami_ids(self) -> List[str]:
        if self.output_resources is None:
            return []
        return [ami.image for ami in self.output_resources.amis if ami.image]

    @classmethod
    def from_aws_image(
        cls, image: Dict[str, Any], ignore_tags: Optional[IgnoreTagsConfig] = None
    ) -> "ImageInfo":
        """Create ImageInfo from a GetImage response."""
        tests = image.get("imageTestsConfiguration")
        outputs = image.get("outputResources")
        return cls(
            arn=image.get("arn", ""),
            infrastructure_configuration_arn=(image.get("infrastructureConfiguration") or {}).get("arn"),
            container_recipe_arn=(image.get("containerRecipe") or {}).get("arn"),
            distribution_configuration_arn=(image.get("distributionConfiguration") or {}).get("arn"),
            image_recipe_arn=(image.get("imageRecipe") or {}).get("arn"),
            enhanced_image_metadata_enabled=image.get(
                "enhancedImageMetadataEnabled", DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED
            ),
            image_tests_configuration=ImageTestsConfiguration.from_api(tests) if tests else None,
            output_resources=OutputResources.from_api(outputs) if outputs else None,
            date_created=image.get("dateCreated", ""),
            name=image.get("name", ""),
            os_version=image.get("osVersion", ""),
            platform=image.get("platform", ""),
            version=image.get("version", ""),
            status=(image.get("state") or {}).get("status", ""),
            tags=KeyValueTags.new(image.get("tags")).ignore_aws().ignore_config(ignore_tags).map(),
        )

    def to_state(self) -> Dict[str, Any]:
        return asdict(self)
