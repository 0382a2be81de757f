"""Base job class for Image Builder operations."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional
import boto3
import uuid
from imagebuilder_ops.core.aws.imagebuilder import ImageBuilderManager
from imagebuilder_ops.core.models.tags import IgnoreTagsConfig
from imagebuilder_ops.core.resources import BaseResource, ImageResource, get_resource
from imagebuilder_ops.utils.logger import setup_logger
from imagebuilder_ops.utils.config import ConfigManager
from imagebuilder_ops.utils.session import SessionManager


class BaseJob(ABC):
    """Base class for all Image Builder jobs."""

    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        job_name: Optional[str] = None,
        region: Optional[str] = None,
        manager: Optional[ImageBuilderManager] = None,
    ):
        """Initialize the job with configuration.

        ``manager`` replaces the AWS-backed manager, mainly for tests.
        """
        self.config_manager = config_manager or ConfigManager()
        self.job_name = job_name or self.__class__.__name__.lower().replace("job", "")
        self.region = region or self.config_manager.get_aws_region()
        self.correlation_id = str(uuid.uuid4())[:8]  # Short correlation ID for tracking
        self._manager = manager

        self.logger = setup_logger(
            name=self.__class__.__module__,
            log_file=f"{self.job_name}.log",
            level=self.config_manager.get_logging_level(),
            log_dir=self.config_manager.get_logging_path(),
        )

    def log(self, message: str, level: str = "info") -> None:
        getattr(self.logger, level)(f"[{self.correlation_id}] {message}")

    def create_aws_session(self) -> boto3.Session:
        """
        Create AWS session, assuming the provision role when one is configured
        """
        account_id = self.config_manager.get_account_id()
        role_name = self.config_manager.get_provision_role()

        if account_id and role_name:
            self.log(f"Creating AWS session for account {account_id} with role {role_name} in {self.region}")
            return SessionManager.get_session(
                account_id=account_id,
                role=role_name,
                region=self.region,
                role_session_name=f"imagebuilder-ops-{self.job_name}",
            )

        self.log(f"Creating AWS session from default credentials in {self.region}")
        return SessionManager.get_default_session(
            region=self.region, profile=self.config_manager.get_aws_profile()
        )

    @property
    def manager(self) -> ImageBuilderManager:
        if self._manager is None:
            self._manager = ImageBuilderManager(self.create_aws_session(), self.region)
        return self._manager

    def get_resource(self, type_name: str) -> BaseResource:
        """Resource handler wired with the configured tag and waiter settings."""
        ignore_tags = IgnoreTagsConfig.from_dict(self.config_manager.get_ignore_tags_config())
        if type_name == ImageResource.type_name:
            return get_resource(
                type_name,
                self.manager,
                ignore_tags,
                create_timeout_minutes=self.config_manager.get_image_create_timeout(),
                waiter_options=self.config_manager.get_waiter_config(),
            )
        return get_resource(type_name, self.manager, ignore_tags)

    def resolve_state_path(self, state_path: Optional[str] = None) -> Path:
        return Path(state_path or self.config_manager.get_state_path())

    def error(self, message: str, **extra) -> Dict[str, Any]:
        self.log(message, "error")
        return {"status": "error", "message": message, "correlation_id": self.correlation_id, **extra}

    @abstractmethod
    def execute(self, **kwargs) -> Dict[str, Any]:
        """Execute the job with given parameters."""
        pass
