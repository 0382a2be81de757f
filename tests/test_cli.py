"""Smoke tests for the CLI."""

import yaml
from click.testing import CliRunner

from imagebuilder_ops import __version__
from imagebuilder_ops.cli import cli, parse_tags

import pytest

from conftest import CONTAINER_RECIPE_ARN, IMAGE_ARN, INFRA_ARN, image_payload, not_found

runner = CliRunner()


def invoke(args, config_manager, manager, **kwargs):
    return runner.invoke(
        cli, args, obj={"config_manager": config_manager, "manager": manager}, **kwargs
    )


def test_version():
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_help_lists_commands():
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    for command in ("apply", "plan", "destroy", "image", "container-recipe"):
        assert command in result.output


def test_parse_tags():
    assert parse_tags(["a=1", "b=x=y", "c="]) == {"a": "1", "b": "x=y", "c": ""}


def test_image_show(config_manager, manager, client):
    client.get_image.return_value = {"image": image_payload()}
    result = invoke(["image", "show", IMAGE_ARN], config_manager, manager)
    assert result.exit_code == 0
    assert "ami-0123456789abcdef0" in result.output


def test_image_show_missing_exits_non_zero(config_manager, manager, client):
    client.get_image.side_effect = not_found()
    result = invoke(["image", "show", IMAGE_ARN], config_manager, manager)
    assert result.exit_code == 1
    assert "not found" in result.output


def test_delete_requires_confirmation(config_manager, manager, client):
    result = invoke(["container-recipe", "delete", CONTAINER_RECIPE_ARN], config_manager, manager, input="n\n")
    assert "Operation cancelled by user." in result.output
    client.delete_container_recipe.assert_not_called()

    result = invoke(["container-recipe", "delete", CONTAINER_RECIPE_ARN, "--force"], config_manager, manager)
    assert result.exit_code == 0
    client.delete_container_recipe.assert_called_once_with(containerRecipeArn=CONTAINER_RECIPE_ARN)


def test_image_tag(config_manager, manager, client):
    client.get_image.return_value = {"image": image_payload()}
    result = invoke(["image", "tag", IMAGE_ARN, "--set", "Env=dev", "--unset", "Team"], config_manager, manager)
    assert result.exit_code == 0
    client.tag_resource.assert_called_once_with(resourceArn=IMAGE_ARN, tags={"Env": "dev"})


def test_image_tag_rejects_bad_pair(config_manager, manager, client):
    result = invoke(["image", "tag", IMAGE_ARN, "--set", "novalue"], config_manager, manager)
    assert result.exit_code != 0
    client.tag_resource.assert_not_called()


def test_apply_dry_run_and_output_file(tmp_path, config_manager, manager, client):
    definitions = tmp_path / "resources.yaml"
    definitions.write_text(
        yaml.safe_dump(
            {
                "resources": [
                    {
                        "type": "aws_imagebuilder_image",
                        "name": "app-image",
                        "properties": {"infrastructure_configuration_arn": INFRA_ARN},
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    output = tmp_path / "plan.yaml"
    result = invoke(
        ["apply", "-f", str(definitions), "--dry-run", "--output", str(output)], config_manager, manager
    )
    assert result.exit_code == 0
    saved = yaml.safe_load(output.read_text(encoding="utf-8"))
    assert saved["summary"]["create"] == 1
    assert saved["message"].startswith("DRY RUN")
    client.create_image.assert_not_called()


@pytest.mark.parametrize("command", [["plan", "-f"], ["apply", "--force", "-f"]])
def test_missing_definitions_file(tmp_path, config_manager, manager, command):
    result = invoke(command + [str(tmp_path / "missing.yaml")], config_manager, manager)
    assert result.exit_code == 2
