"""Command line entry point for the Storage Area Provisioner."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, is_dataclass
from typing import Any, Callable, TextIO

import click

from . import __version__
from . import logging as structured_logging
from .config import ProvisionerSettings
from .handlers import StorageAreaProvisionHandler, StorageAreaValidationHandler
from .results import Result
from .services.aws.clients import ClientFactory
from .services.s3.reconciler import BucketReconciler
from .tracing import initialize_tracing

logger = logging.getLogger(__name__)


def build_handlers(
    settings: ProvisionerSettings | None = None,
    factory: ClientFactory | None = None,
) -> tuple[StorageAreaProvisionHandler, StorageAreaValidationHandler]:
    """Wire the reconciler and the handlers sharing one client factory."""
    settings = settings or ProvisionerSettings.from_env()
    factory = factory or ClientFactory()
    reconciler = BucketReconciler(settings)
    return (
        StorageAreaProvisionHandler(factory, reconciler),
        StorageAreaValidationHandler(factory, reconciler),
    )


def result_to_dict(result: Result[Any]) -> dict[str, Any]:
    """Render a Result as a JSON-serializable dict."""
    if result.ok:
        value = result.value
        return {"ok": True, "value": asdict(value) if is_dataclass(value) else value}
    failure = result.failure
    return {
        "ok": False,
        "kind": failure.kind.value,
        "message": failure.message,
        "problems": [
            {"message": p.message, "cause": None if p.cause is None else repr(p.cause)}
            for p in failure.problems
        ],
    }


def _run(ctx: click.Context, payload: TextIO, operation: Callable[[dict[str, Any]], Result[Any]]) -> None:
    try:
        request = json.load(payload)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"payload is not valid JSON: {e}", param_hint="PAYLOAD") from e

    result = operation(request)
    click.echo(json.dumps(result_to_dict(result), indent=2))
    ctx.exit(0 if result.ok else 1)


@click.group()
@click.version_option(version=__version__, prog_name="storage-area-provisioner")
@click.option("--log-level", default="INFO", show_default=True, help="Logging level")
@click.pass_context
def cli(ctx: click.Context, log_level: str) -> None:
    """Provision S3-backed storage areas for data product components.

    Every command reads a JSON request (or - for stdin) and prints the
    result as JSON. The exit code is 1 when the operation failed.
    """
    structured_logging.setup_structured_logging(getattr(logging, log_level.upper(), logging.INFO))
    initialize_tracing()
    ctx.ensure_object(dict)
    ctx.obj["handlers"] = build_handlers()


@cli.command()
@click.argument("payload", type=click.File("r"))
@click.pass_context
def provision(ctx: click.Context, payload: TextIO) -> None:
    """Reconcile the bucket and create the component folder."""
    provision_handler, _ = ctx.obj["handlers"]
    _run(ctx, payload, provision_handler.provision_payload)


@cli.command()
@click.argument("payload", type=click.File("r"))
@click.pass_context
def unprovision(ctx: click.Context, payload: TextIO) -> None:
    """Delete the component folder and everything under it."""
    provision_handler, _ = ctx.obj["handlers"]
    _run(ctx, payload, provision_handler.unprovision_payload)


@cli.command()
@click.argument("payload", type=click.File("r"))
@click.pass_context
def validate(ctx: click.Context, payload: TextIO) -> None:
    """Check that the request could be provisioned."""
    _, validation_handler = ctx.obj["handlers"]
    _run(ctx, payload, validation_handler.validate_payload)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
