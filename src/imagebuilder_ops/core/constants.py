#!/usr/bin/env python3
"""Core constants for Image Builder operations."""

# Resource type names
IMAGE_RESOURCE_TYPE = "aws_imagebuilder_image"
CONTAINER_RECIPE_RESOURCE_TYPE = "aws_imagebuilder_container_recipe"

# Image Builder API
RESOURCE_NOT_FOUND_CODE = "ResourceNotFoundException"
AWS_TAG_PREFIX = "aws:"

# Image build status values
IMAGE_STATUS_AVAILABLE = "AVAILABLE"
IMAGE_STATUS_PENDING = (
    "PENDING",
    "CREATING",
    "BUILDING",
    "TESTING",
    "DISTRIBUTING",
    "INTEGRATING",
)

# ARN patterns
_IMAGEBUILDER_ARN_PREFIX = r"^arn:aws[^:]*:imagebuilder:[^:]+:(?:\d{12}|aws):"
CONTAINER_RECIPE_ARN_PATTERN = (
    _IMAGEBUILDER_ARN_PREFIX + r"container-recipe/[a-z0-9-_]+/\d+\.\d+\.\d+$"
)
IMAGE_RECIPE_ARN_PATTERN = (
    _IMAGEBUILDER_ARN_PREFIX + r"image-recipe/[a-z0-9-_]+/\d+\.\d+\.\d+$"
)
DISTRIBUTION_CONFIGURATION_ARN_PATTERN = (
    _IMAGEBUILDER_ARN_PREFIX + r"distribution-configuration/[a-z0-9-_]+$"
)
INFRASTRUCTURE_CONFIGURATION_ARN_PATTERN = (
    _IMAGEBUILDER_ARN_PREFIX + r"infrastructure-configuration/[a-z0-9-_]+$"
)
GENERIC_ARN_PATTERN = r"^arn:[^:]+:[^:]+:[^:]*:[^:]*:.+$"

# Image defaults
DEFAULT_IMAGE_TESTS_ENABLED = True
DEFAULT_IMAGE_TESTS_TIMEOUT_MINUTES = 720
MIN_IMAGE_TESTS_TIMEOUT_MINUTES = 60
MAX_IMAGE_TESTS_TIMEOUT_MINUTES = 1440
DEFAULT_ENHANCED_IMAGE_METADATA_ENABLED = True

# Container recipe allowed values
CONTAINER_TYPES = ("DOCKER",)
PLATFORM_OVERRIDES = ("Windows", "Linux")
TARGET_REPOSITORY_SERVICES = ("ECR",)

# Waiter defaults
DEFAULT_IMAGE_CREATE_TIMEOUT_MINUTES = 60
DEFAULT_POLL_INTERVAL_SECONDS = 30
DEFAULT_WAITER_DELAY_SECONDS = 0
DEFAULT_NOT_FOUND_CHECKS = 20

# AWS Service Constants
DEFAULT_AWS_REGION = "ap-southeast-2"
DEFAULT_STATE_PATH = "state/imagebuilder_state.yaml"

# File and Directory Constants
LOG_ROTATION_MAX_BYTES = 10 * 1024 * 1024  # 10MB
LOG_BACKUP_COUNT = 5
