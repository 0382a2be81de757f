#!/usr/bin/env python3
"""
Image Builder Ops - CLI
Declarative management of EC2 Image Builder images and container recipes
"""

import click
from pathlib import Path

from imagebuilder_ops import __version__
from imagebuilder_ops.core.constants import (
    CONTAINER_RECIPE_RESOURCE_TYPE,
    IMAGE_RESOURCE_TYPE,
)
from imagebuilder_ops.jobs import (
    ApplyJob,
    DeleteResourceJob,
    DestroyJob,
    ImportResourceJob,
    PlanJob,
    ShowResourceJob,
    TagResourceJob,
)
from imagebuilder_ops.utils.config import ConfigManager
from imagebuilder_ops.utils.decorators import resource_operation
from imagebuilder_ops.utils.logger import setup_logger


def setup_logging(verbose: bool = False):
    level = "DEBUG" if verbose else "INFO"
    return setup_logger("imagebuilder_ops_cli", "cli.log", level)


def parse_tags(values) -> dict:
    """Parse repeated KEY=VALUE options."""
    tags = {}
    for value in values:
        key, sep, tag_value = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param_hint="--set")
        tags[key] = tag_value
    return tags


# Common CLI options
def state_option(func):
    return click.option(
        "--state", "state_path", type=click.Path(dir_okay=False), help="State file path"
    )(func)


def add_common_options(func):
    func = click.option("--output", type=click.Path(dir_okay=False), help="Output file path")(func)
    func = click.option("--force", is_flag=True, help="Skip confirmation prompts")(func)
    func = click.option("--verbose", is_flag=True, help="Enable verbose output")(func)
    func = click.option(
        "--dry-run", is_flag=True, help="Preview changes without executing"
    )(func)
    return func


@click.group()
@click.option("--region", default=None, help="AWS region (defaults to configuration)")
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding settings.yaml",
)
@click.pass_context
def cli(ctx, region, config_dir):
    """Image Builder Ops - EC2 Image Builder resource management"""
    ctx.ensure_object(dict)
    if "config_manager" not in ctx.obj:
        ctx.obj["config_manager"] = ConfigManager(config_dir)
    ctx.obj["region"] = region
    ctx.obj.setdefault("manager", None)


@cli.command()
@click.option("--file", "-f", "definitions_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Resource definitions file")
@click.option("--no-refresh", is_flag=True, help="Plan against recorded state without reading AWS")
@click.option("--output", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--verbose", is_flag=True, help="Enable verbose output")
@state_option
@click.pass_context
@resource_operation(PlanJob)
def plan(ctx, definitions_path, no_refresh, output, verbose, state_path):
    """Show the changes apply would make"""
    setup_logging(verbose)
    return {"definitions_path": definitions_path, "state_path": state_path, "refresh": not no_refresh}


@cli.command()
@click.option("--file", "-f", "definitions_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Resource definitions file")
@add_common_options
@state_option
@click.pass_context
@resource_operation(ApplyJob, requires_confirmation=True)
def apply(ctx, definitions_path, output, force, verbose, dry_run, state_path):
    """Create, replace, update and delete resources to match the definitions"""
    setup_logging(verbose)


@cli.command()
@add_common_options
@state_option
@click.pass_context
@resource_operation(DestroyJob, requires_confirmation=True)
def destroy(ctx, output, force, verbose, dry_run, state_path):
    """Delete every resource recorded in state"""
    setup_logging(verbose)


def resource_group(name: str, type_name: str, description: str) -> click.Group:
    """Build the show/delete/tag/import command group for one resource type."""

    @click.group(name=name, help=description)
    def group():
        pass

    @group.command()
    @click.argument("arn")
    @click.option("--output", type=click.Path(dir_okay=False), help="Output file path")
    @click.pass_context
    @resource_operation(ShowResourceJob)
    def show(ctx, arn, output):
        """Show a resource by ARN"""
        return {"type_name": type_name, "arn": arn}

    @group.command()
    @click.argument("arn")
    @add_common_options
    @click.pass_context
    @resource_operation(DeleteResourceJob, requires_confirmation=True)
    def delete(ctx, arn, output, force, verbose, dry_run):
        """Delete a resource by ARN"""
        setup_logging(verbose)
        return {"type_name": type_name, "arn": arn, "dry_run": dry_run}

    @group.command()
    @click.argument("arn")
    @click.option("--set", "-s", "set_tags", multiple=True, help="Tag to add or change (KEY=VALUE)")
    @click.option("--unset", "-u", "unset_keys", multiple=True, help="Tag key to remove")
    @add_common_options
    @click.pass_context
    @resource_operation(TagResourceJob)
    def tag(ctx, arn, set_tags, unset_keys, output, force, verbose, dry_run):
        """Add, change or remove tags on a resource"""
        setup_logging(verbose)
        return {
            "type_name": type_name,
            "arn": arn,
            "set_tags": parse_tags(set_tags),
            "unset_keys": list(unset_keys),
            "dry_run": dry_run,
        }

    @group.command(name="import")
    @click.argument("resource_name")
    @click.argument("arn")
    @click.option("--output", type=click.Path(dir_okay=False), help="Output file path")
    @state_option
    @click.pass_context
    @resource_operation(ImportResourceJob)
    def import_(ctx, resource_name, arn, output, state_path):
        """Adopt an existing resource into state under RESOURCE_NAME"""
        return {"type_name": type_name, "name": resource_name, "arn": arn, "state_path": state_path}

    return group


cli.add_command(resource_group("image", IMAGE_RESOURCE_TYPE, "Image Builder images"))
cli.add_command(
    resource_group("container-recipe", CONTAINER_RECIPE_RESOURCE_TYPE, "Image Builder container recipes")
)


@cli.command()
def version():
    """Show version information"""
    click.echo(f"Image Builder Ops {__version__}")


if __name__ == "__main__":
    cli()
