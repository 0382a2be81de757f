"""Decorator patterns for Image Builder CLI operations."""

import click
import yaml
from functools import wraps
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Type

from imagebuilder_ops.jobs.base import BaseJob
from imagebuilder_ops.utils.config import ConfigManager
from imagebuilder_ops.utils.logger import setup_logger

# CLI-only options that never reach a job
CLI_ONLY_OPTIONS = ("force", "verbose", "output")


def handle_operation_error(operation_name: str, error: Exception) -> None:
    """Centralized error handling for operations.

    Args:
        operation_name: Name of the operation that failed
        error: Exception that occurred
    """
    error_msg = f"Error in {operation_name}: {str(error)}"
    click.echo(error_msg, err=True)

    logger = setup_logger("imagebuilder_ops.errors", "errors.log")
    logger.error(
        error_msg,
        extra={"operation": operation_name, "error_type": type(error).__name__},
    )


def format_results(results: Any) -> str:
    return yaml.safe_dump(results, default_flow_style=False, sort_keys=False)


def handle_output(
    results: Dict[str, Any],
    output_path: Optional[str] = None,
    correlation_id: Optional[str] = None,
) -> None:
    """Print results as YAML or write them to ``output_path``."""
    logger = setup_logger("imagebuilder_ops.output", "operations.log")

    status = results.get("status", "unknown")
    logger.info(f"[{correlation_id or 'N/A'}] Operation completed ({status}): {results.get('message', '')}")
    if results.get("errors"):
        logger.error(f"[{correlation_id or 'N/A'}] Operation errors: {results['errors']}")

    if output_path:
        Path(output_path).write_text(format_results(results), encoding="utf-8")
        click.echo(f"Results saved to {output_path}")
        logger.info(f"[{correlation_id or 'N/A'}] Results saved to {output_path}")
    else:
        click.echo(format_results(results))


def resource_operation(job_class: Type[BaseJob], requires_confirmation: bool = False):
    """Run ``job_class`` for a click command.

    The command body may return a dict of job arguments; otherwise the CLI
    options are passed through, minus the CLI-only ones.
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(ctx, **kwargs):
            operation_name = func.__name__

            if (
                requires_confirmation
                and not kwargs.get("force", False)
                and not kwargs.get("dry_run", False)
            ):
                if not click.confirm(f"Continue with {operation_name}?"):
                    click.echo("Operation cancelled by user.")
                    return None

            job_kwargs = func(ctx, **kwargs)
            if job_kwargs is None:
                job_kwargs = {k: v for k, v in kwargs.items() if k not in CLI_ONLY_OPTIONS}

            try:
                obj = ctx.obj or {}
                job = job_class(
                    config_manager=obj.get("config_manager") or ConfigManager(),
                    region=obj.get("region"),
                    manager=obj.get("manager"),
                )
                results = job.execute(**job_kwargs)
            except Exception as e:
                handle_operation_error(operation_name, e)
                raise

            handle_output(results, kwargs.get("output"), getattr(job, "correlation_id", None))
            if results.get("status") == "error":
                ctx.exit(1)
            return results

        return wrapper

    return decorator
