#!/usr/bin/env python3
"""
utils/session.py

boto3 session helpers: STS role assumption for the provisioning role, or the
default credential chain when no role is configured.

Assumed-role sessions carry refreshable credentials, so clients created from
them keep working through image builds that outlast the STS expiry.
"""

from functools import partial
from typing import Any, Dict, Optional, Tuple

import boto3
import botocore.session
from botocore.credentials import RefreshableCredentials
from botocore.exceptions import BotoCoreError, ClientError
from imagebuilder_ops.core.constants import DEFAULT_AWS_REGION
from .exceptions import SessionError, ValidationRules
from .logger import setup_logger

logger = setup_logger(__name__, "session.log")


def fetch_role_credentials(
    role_arn: str, region: str, role_session_name: str
) -> Dict[str, Any]:
    """Call STS AssumeRole and return credentials in botocore metadata form."""
    try:
        credentials = boto3.client("sts", region_name=region).assume_role(
            RoleArn=role_arn, RoleSessionName=role_session_name
        )["Credentials"]
    except ClientError as e:
        error_code = e.response["Error"]["Code"]
        raise SessionError(f"Failed to assume role {role_arn}: {error_code}") from e
    except BotoCoreError as e:
        raise SessionError(f"Failed to assume role {role_arn}: {e}") from e

    logger.debug(f"Credentials for {role_arn} expire at {credentials['Expiration']}")
    return {
        "access_key": credentials["AccessKeyId"],
        "secret_key": credentials["SecretAccessKey"],
        "token": credentials["SessionToken"],
        "expiry_time": credentials["Expiration"].isoformat(),
    }


def assume_role(
    account_id: str,
    role: str,
    region: str = DEFAULT_AWS_REGION,
    role_session_name: str = "imagebuilder-ops",
) -> boto3.Session:
    """Assume ``role`` in ``account_id`` and return a session that re-assumes it on expiry."""
    if not ValidationRules.validate_aws_account_id(account_id):
        raise SessionError(f"Invalid AWS account ID: {account_id}. Must be 12 digits.")

    role_arn = f"arn:aws:iam::{account_id}:role/{role}"
    refresh = partial(fetch_role_credentials, role_arn, region, role_session_name)
    credentials = RefreshableCredentials.create_from_metadata(
        metadata=refresh(),
        refresh_using=refresh,
        method="sts-assume-role",
    )

    core_session = botocore.session.get_session()
    core_session._credentials = credentials
    core_session.set_config_variable("region", region)
    return boto3.Session(botocore_session=core_session)


class SessionManager:
    """Hands out boto3 sessions, reusing assumed-role sessions within a process."""

    _sessions: Dict[Tuple[str, str, str], boto3.Session] = {}

    @classmethod
    def get_session(
        cls,
        account_id: str,
        role: str,
        region: str = DEFAULT_AWS_REGION,
        role_session_name: str = "imagebuilder-ops",
    ) -> boto3.Session:
        key = (account_id, role, region)
        if key not in cls._sessions:
            logger.info(f"Assuming role {role} in account {account_id} ({region})")
            cls._sessions[key] = assume_role(account_id, role, region, role_session_name)
        return cls._sessions[key]

    @classmethod
    def get_default_session(
        cls, region: str = DEFAULT_AWS_REGION, profile: Optional[str] = None
    ) -> boto3.Session:
        if profile:
            return boto3.Session(profile_name=profile, region_name=region)
        return boto3.Session(region_name=region)

    @classmethod
    def clear(cls) -> None:
        cls._sessions.clear()
