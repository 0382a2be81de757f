"""Tests for settings loading and session selection."""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
import yaml

from imagebuilder_ops.jobs import ShowResourceJob
from imagebuilder_ops.utils.config import ConfigManager
from imagebuilder_ops.utils.exceptions import SessionError
from imagebuilder_ops.utils.session import SessionManager, assume_role

from conftest import client_error


def test_defaults_without_settings_file(tmp_path, monkeypatch):
    monkeypatch.delenv("AWS_REGION", raising=False)
    config = ConfigManager(tmp_path)
    assert config.get_aws_region() == "ap-southeast-2"
    assert config.get_image_create_timeout() == 60
    assert config.get_waiter_config() == {"poll_interval": 30, "delay": 0, "not_found_checks": 20}
    assert config.get_ignore_tags_config() == {"keys": [], "key_prefixes": []}


def test_values_and_env_override(config_dir, monkeypatch):
    config = ConfigManager(config_dir)
    monkeypatch.delenv("AWS_REGION", raising=False)
    assert config.get_aws_region() == "ap-southeast-2"
    assert config.get_waiter_config()["not_found_checks"] == 2

    monkeypatch.setenv("AWS_REGION", "us-west-2")
    assert config.get_aws_region() == "us-west-2"


def test_yml_extension_and_reload(tmp_path):
    settings = tmp_path / "settings.yml"
    settings.write_text(yaml.safe_dump({"timeouts": {"image_create_minutes": 5}}), encoding="utf-8")
    config = ConfigManager(tmp_path)
    assert config.get_image_create_timeout() == 5

    settings.write_text(yaml.safe_dump({"timeouts": {"image_create_minutes": 7}}), encoding="utf-8")
    assert config.get_image_create_timeout() == 5
    config.reload_config()
    assert config.get_image_create_timeout() == 7


def test_session_assumes_provision_role_when_configured(tmp_path, monkeypatch):
    monkeypatch.delenv("AWS_REGION", raising=False)
    (tmp_path / "settings.yaml").write_text(
        yaml.safe_dump({"aws": {"account_id": "123456789012", "roles": {"provision": "ImageBuilderOps"}}}),
        encoding="utf-8",
    )
    job = ShowResourceJob(ConfigManager(tmp_path))
    with patch("imagebuilder_ops.jobs.base.SessionManager") as sessions:
        job.create_aws_session()
    sessions.get_session.assert_called_once()
    assert sessions.get_session.call_args.kwargs["role"] == "ImageBuilderOps"
    sessions.get_default_session.assert_not_called()


def test_session_falls_back_to_default_chain(config_manager, monkeypatch):
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    job = ShowResourceJob(config_manager, region="eu-west-1")
    with patch("imagebuilder_ops.jobs.base.SessionManager") as sessions:
        job.create_aws_session()
    sessions.get_default_session.assert_called_once_with(region="eu-west-1", profile=None)


def test_assume_role_rejects_bad_account_id():
    with pytest.raises(SessionError, match="12 digits"):
        assume_role("1234", "ImageBuilderOps")


def test_assume_role_wraps_sts_failure():
    with patch("imagebuilder_ops.utils.session.boto3") as boto:
        boto.client.return_value.assume_role.side_effect = client_error("AccessDenied")
        with pytest.raises(SessionError, match="AccessDenied"):
            assume_role("123456789012", "ImageBuilderOps")


def test_assumed_role_sessions_are_reused():
    SessionManager.clear()
    with patch("imagebuilder_ops.utils.session.assume_role") as assume:
        first = SessionManager.get_session("123456789012", "ImageBuilderOps", "us-east-1")
        second = SessionManager.get_session("123456789012", "ImageBuilderOps", "us-east-1")
    assert first is second
    assume.assert_called_once()
    SessionManager.clear()


def sts_credentials(access_key, expiration):
    return {
        "Credentials": {
            "AccessKeyId": access_key,
            "SecretAccessKey": "secret",
            "SessionToken": "token",
            "Expiration": expiration,
        }
    }


def test_assumed_role_credentials_refresh_after_expiry():
    now = datetime.now(timezone.utc)
    with patch("imagebuilder_ops.utils.session.boto3.client") as client:
        client.return_value.assume_role.side_effect = [
            sts_credentials("AKIAEXPIRED", now - timedelta(minutes=1)),
            sts_credentials("AKIAFRESH", now + timedelta(hours=1)),
        ]
        session = assume_role("123456789012", "ImageBuilderOps", "us-east-1")
        frozen = session.get_credentials().get_frozen_credentials()

    assert frozen.access_key == "AKIAFRESH"
    assert client.return_value.assume_role.call_count == 2
    assert session.region_name == "us-east-1"
