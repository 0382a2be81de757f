"""Simple data models for Image Builder container recipes."""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from imagebuilder_ops.core.constants import (
    CONTAINER_TYPES,
    GENERIC_ARN_PATTERN,
    PLATFORM_OVERRIDES,
    TARGET_REPOSITORY_SERVICES,
)
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig, KeyValueTags
from imagebuilder_ops.utils.exceptions import ResourceValidationError, ValidationRules


@dataclass
class ComponentConfiguration:
    component_arn: str

    def to_api(self) -> Dict[str, Any]:
        return {"componentArn": self.component_arn}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ComponentConfiguration":
        return cls(component_arn=data.get("componentArn", ""))


@dataclass
class TargetContainerRepository:
    repository_name: str
    service: str

    def to_api(self) -> Dict[str, Any]:
        api: Dict[str, Any] = {}
        if self.repository_name:
            api["repositoryName"] = self.repository_name
        if self.service:
            api["service"] = self.service
        return api

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TargetContainerRepository":
        return cls(
            repository_name=data.get("repositoryName", ""),
            service=data.get("service", ""),
        )


@dataclass
class ContainerRecipeConfig:
    """Desired configuration of a container recipe."""
    name: str
    container_type: str
    parent_image: str
    semantic_version: str
    component: List[ComponentConfiguration]
    target_repository: TargetContainerRepository
    description: Optional[str] = None
    dockerfile_template_data: Optional[str] = None
    dockerfile_template_uri: Optional[str] = None
    image_os_version_override: Optional[str] = None
    kms_key_id: Optional[str] = None
    platform_override: Optional[str] = None
    working_directory: Optional[str] = None
    tags: Dict[str, str] = field(default_factory=dict)

    CONFIGURABLE = (
        "component",
        "container_type",
        "description",
        "dockerfile_template_data",
        "dockerfile_template_uri",
        "image_os_version_override",
        "kms_key_id",
        "name",
        "parent_image",
        "platform_override",
        "semantic_version",
        "tags",
        "target_repository",
        "working_directory",
    )
    COMPUTED = ("arn", "date_created", "encrypted", "owner", "platform")
    FORCE_NEW = tuple(k for k in CONFIGURABLE if k != "tags")
    OPTIONAL_COMPUTED = ("dockerfile_template_data",)
    # Accepted by CreateContainerRecipe but never returned by GetContainerRecipe
    WRITE_ONLY = ("dockerfile_template_uri", "image_os_version_override", "platform_override")

    @staticmethod
    def validate(properties: Dict[str, Any]) -> List[str]:
        errors = ValidationRules.unsupported_arguments(
            properties, ContainerRecipeConfig.CONFIGURABLE, ContainerRecipeConfig.COMPUTED
        )

        for key in ("component", "container_type", "name", "parent_image", "semantic_version", "target_repository"):
            if properties.get(key) in (None, "", [], {}):
                errors.append(f"{key}: required field is not set")

        components = properties.get("component")
        if components:
            if not isinstance(components, list):
                errors.append("component: expected a list of blocks")
            else:
                for index, component in enumerate(components):
                    prefix = f"component.{index}"
                    if not isinstance(component, dict):
                        errors.append(f"{prefix}: expected a block")
                        continue
                    errors.extend(
                        f"{prefix}.{e}"
                        for e in ValidationRules.unsupported_arguments(component, ("component_arn",))
                    )
                    errors.append(
                        ValidationRules.string_match(
                            f"{prefix}.component_arn",
                            component.get("component_arn"),
                            GENERIC_ARN_PATTERN,
                            "invalid ARN",
                        )
                    )

        if properties.get("container_type"):
            errors.append(
                ValidationRules.string_in_slice("container_type", properties["container_type"], CONTAINER_TYPES)
            )
        if properties.get("platform_override") is not None:
            errors.append(
                ValidationRules.string_in_slice(
                    "platform_override", properties["platform_override"], PLATFORM_OVERRIDES
                )
            )

        lengths = {
            "description": 1024,
            "dockerfile_template_data": 16000,
            "image_os_version_override": 1024,
            "name": 126,
            "parent_image": 126,
            "semantic_version": 128,
            "working_directory": 1024,
        }
        for key, maximum in lengths.items():
            if properties.get(key) is not None:
                errors.append(ValidationRules.string_len_between(key, properties[key], 1, maximum))

        if properties.get("kms_key_id") is not None:
            errors.append(
                ValidationRules.string_match(
                    "kms_key_id", properties["kms_key_id"], GENERIC_ARN_PATTERN, "invalid ARN"
                )
            )

        has_data = properties.get("dockerfile_template_data") is not None
        has_uri = properties.get("dockerfile_template_uri") is not None
        if has_data == has_uri:
            errors.append(
                "dockerfile_template_data: exactly one of dockerfile_template_data, "
                "dockerfile_template_uri must be specified"
            )

        repository = properties.get("target_repository")
        if repository:
            if not isinstance(repository, dict):
                errors.append("target_repository: expected a single block")
            else:
                errors.extend(
                    f"target_repository.{e}"
                    for e in ValidationRules.unsupported_arguments(
                        repository, ("repository_name", "service")
                    )
                )
                errors.append(
                    ValidationRules.string_len_between(
                        "target_repository.repository_name", repository.get("repository_name"), 1, 1024
                    )
                )
                errors.append(
                    ValidationRules.string_in_slice(
                        "target_repository.service", repository.get("service"), TARGET_REPOSITORY_SERVICES
                    )
                )

        if properties.get("tags") is not None and not isinstance(properties["tags"], dict):
            errors.append("tags: expected a map of strings")
        return [e for e in errors if e]

    @classmethod
    def from_config(cls, name: str, properties: Dict[str, Any]) -> "ContainerRecipeConfig":
        """Build from a resource block, raising ResourceValidationError on bad input."""
        errors = cls.validate(properties)
        if errors:
            raise ResourceValidationError(name, errors)

        repository = properties["target_repository"]
        return cls(
            name=properties["name"],
            container_type=properties["container_type"],
            parent_image=properties["parent_image"],
            semantic_version=properties["semantic_version"],
            component=[ComponentConfiguration(c["component_arn"]) for c in properties["component"]],
            target_repository=TargetContainerRepository(
                repository_name=repository["repository_name"],
                service=repository["service"],
            ),
            description=properties.get("description"),
            dockerfile_template_data=properties.get("dockerfile_template_data"),
            dockerfile_template_uri=properties.get("dockerfile_template_uri"),
            image_os_version_override=properties.get("image_os_version_override"),
            kms_key_id=properties.get("kms_key_id"),
            platform_override=properties.get("platform_override"),
            working_directory=properties.get("working_directory"),
            tags=KeyValueTags.new(properties.get("tags")).map(),
        )

    def to_create_params(self, client_token: str) -> Dict[str, Any]:
        """Expand into CreateContainerRecipe request parameters."""
        params: Dict[str, Any] = {
            "clientToken": client_token,
            "components": [c.to_api() for c in self.component],
            "containerType": self.container_type,
            "name": self.name,
            "parentImage": self.parent_image,
            "semanticVersion": self.semantic_version,
            "targetRepository": self.target_repository.to_api(),
        }
        optional = {
            "description": self.description,
            "dockerfileTemplateData": self.dockerfile_template_data,
            "dockerfileTemplateUri": self.dockerfile_template_uri,
            "imageOsVersionOverride": self.image_os_version_override,
            "kmsKeyId": self.kms_key_id,
            "platformOverride": self.platform_override,
            "workingDirectory": self.working_directory,
        }
        params.update({k: v for k, v in optional.items() if v})

        tags = KeyValueTags.new(self.tags).ignore_aws()
        if len(tags) > 0:
            params["tags"] = tags.map()
        return params

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ContainerRecipeInfo:
    """Flattened state of a container recipe."""
    arn: str
    name: str = ""
    container_type: str = ""
    parent_image: str = ""
    semantic_version: str = ""
    component: List[ComponentConfiguration] = field(default_factory=list)
    target_repository: Optional[TargetContainerRepository] = None
    description: Optional[str] = None
    dockerfile_template_data: Optional[str] = None
    dockerfile_template_uri: Optional[str] = None
    image_os_version_override: Optional[str] = None
    kms_key_id: Optional[str] = None
    platform_override: Optional[str] = None
    working_directory: Optional[str] = None
    date_created: str = ""
    encrypted: bool = False
    owner: str = ""
    platform: str = ""
    tags: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_aws_container_recipe(
        cls,
        recipe: Dict[str, Any],
        ignore_tags: Optional[IgnoreTagsConfig] = None,
        prior: Optional[Dict[str, Any]] = None,
    ) -> "ContainerRecipeInfo":
        """Create ContainerRecipeInfo from a GetContainerRecipe response.

        Fields the API never returns are carried over from ``prior``.
        """
        prior = prior or {}
        repository = recipe.get("targetRepository")
        return cls(
            arn=recipe.get("arn", ""),
            name=recipe.get("name", ""),
            container_type=recipe.get("containerType", ""),
            parent_image=recipe.get("parentImage", ""),
            semantic_version=recipe.get("version", ""),
            component=[ComponentConfiguration.from_api(c) for c in recipe.get("components") or []],
            target_repository=TargetContainerRepository.from_api(repository) if repository else None,
            description=recipe.get("description"),
            dockerfile_template_data=recipe.get("dockerfileTemplateData"),
            dockerfile_template_uri=prior.get("dockerfile_template_uri"),
            image_os_version_override=prior.get("image_os_version_override"),
            kms_key_id=recipe.get("kmsKeyId"),
            platform_override=prior.get("platform_override"),
            working_directory=recipe.get("workingDirectory"),
            date_created=recipe.get("dateCreated", ""),
            encrypted=bool(recipe.get("encrypted", False)),
            owner=recipe.get("owner", ""),
            platform=recipe.get("platform", ""),
            tags=KeyValueTags.new(recipe.get("tags")).ignore_aws().ignore_config(ignore_tags).map(),
        )

    def to_state(self) -> Dict[str, Any]:
        return asdict(self)
