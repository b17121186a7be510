"""jobsight Command Line Interface.

Entry point for the jobsight CLI tool.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer
from azure.core.exceptions import AzureError
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from jobsight import __version__
from jobsight.contracts import OwnershipStatus, StorageObjectRef, parse_invocation_id
from jobsight.core.config import JobsightSettings, load_settings
from jobsight.core.logging import configure_logging, get_logger
from jobsight.storage.protocols import ObjectStore

__all__ = [
    "app",
]

logger = get_logger(__name__)

app = typer.Typer(
    name="jobsight",
    help="jobsight: inspect blob-bound function invocations.",
    no_args_is_help=True,
)


@dataclass(frozen=True)
class _CliState:
    """Global flags, kept so commands can apply settings-file logging."""

    verbose: bool = False
    json_logs: bool = False


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jobsight version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from a .env file.

    Raises:
        typer.Exit: If an explicit env_file does not exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Do not read a .env file (credentials come from the environment only).",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Read credentials from this .env file instead of searching for one.",
        exists=False,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log store reads at DEBUG level.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write log lines to stderr as JSON.",
    ),
) -> None:
    """jobsight: inspect blob-bound function invocations."""
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")
    ctx.obj = _CliState(verbose=verbose, json_logs=json_logs)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _fail(message: str, *, json_output: bool) -> typer.Exit:
    """Report an error and return the Exit to raise."""
    if json_output:
        typer.echo(json.dumps({"error": message}))
    else:
        typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _load_config(ctx: typer.Context, settings: str | None, *, json_output: bool) -> JobsightSettings:
    """Load settings and re-apply logging from them unless flags override it."""
    settings_path = Path(settings).expanduser() if settings else None
    try:
        config = load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        raise _fail(f"YAML syntax error in {settings}: {e.problem}", json_output=json_output) from None
    except FileNotFoundError:
        raise _fail(f"Settings file not found: {settings}", json_output=json_output) from None
    except ValidationError as e:
        problems = "; ".join(f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in e.errors())
        raise _fail(f"Configuration errors: {problems}", json_output=json_output) from None

    state = ctx.obj if isinstance(ctx.obj, _CliState) else _CliState()
    level = "DEBUG" if state.verbose else config.logging.level
    configure_logging(json_output=state.json_logs or config.logging.json_output, level=level)
    return config


def _create_store(connection_string: str | None, config: JobsightSettings) -> ObjectStore | None:
    """Build the store for an invocation, or None when no credentials exist.

    The snapshot's own connection string wins over configured credentials.
    """
    from jobsight.storage.azure_blob import AzureBlobObjectStore

    if connection_string:
        return AzureBlobObjectStore.from_connection_string(connection_string)
    auth_config = config.storage.get_auth_config()
    if auth_config is None:
        return None
    return AzureBlobObjectStore.from_auth_config(auth_config)


def _require_store(connection_string: str | None, config: JobsightSettings, *, json_output: bool) -> ObjectStore:
    try:
        store = _create_store(connection_string, config)
    except ValidationError as e:
        # Snapshot connection string that does not form a valid auth config
        raise _fail(f"Invalid storage credentials: {e.errors()[0]['msg']}", json_output=json_output) from None
    except ValueError as e:
        # Malformed connection string rejected by the Azure SDK
        raise _fail(f"Invalid storage credentials: {e}", json_output=json_output) from None
    if store is None:
        raise _fail(
            "No storage credentials: the snapshot has no connection string and settings.storage is empty",
            json_output=json_output,
        )
    return store


@app.command()
def show(
    ctx: typer.Context,
    snapshot_path: Path = typer.Argument(
        ...,
        metavar="SNAPSHOT",
        help="Path to an invocation snapshot JSON file.",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Settings YAML (storage credentials, owner metadata key, cache).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON on stdout.",
    ),
) -> None:
    """Show an invocation's blob arguments and parameter logs.

    Examples:

        jobsight show ./invocation.json

        jobsight show ./invocation.json --settings jobsight.yaml --json
    """
    from jobsight.contracts import InvocationSnapshot
    from jobsight.diagnostics import InvocationDiagnostics, ReportTextFormatter

    config = _load_config(ctx, settings, json_output=json_output)

    try:
        snapshot = InvocationSnapshot.from_file(snapshot_path.expanduser())
    except FileNotFoundError:
        raise _fail(f"Snapshot file not found: {snapshot_path}", json_output=json_output) from None
    except ValidationError as e:
        raise _fail(f"Invalid snapshot {snapshot_path}: {e.error_count()} validation error(s)", json_output=json_output) from None

    store = _require_store(snapshot.storage_connection_string, config, json_output=json_output)
    diagnostics = InvocationDiagnostics.from_settings(store, config)

    try:
        report = diagnostics.render(snapshot)
    except AzureError as e:
        logger.error("Storage request failed", invocation_id=str(snapshot.id), error=str(e))
        raise _fail(f"Storage request failed: {e}", json_output=json_output) from None

    if json_output:
        typer.echo(json.dumps(report.to_dict(), indent=2))
        return
    typer.echo(ReportTextFormatter().format(report))


@app.command()
def owner(
    ctx: typer.Context,
    blob: str = typer.Argument(
        ...,
        metavar="CONTAINER/BLOB",
        help="Blob to resolve, as container/blob_name.",
    ),
    invocation: str | None = typer.Option(
        None,
        "--invocation",
        "-i",
        help="Invocation id to compare the owner against.",
    ),
    settings: str | None = typer.Option(
        None,
        "--settings",
        "-s",
        help="Settings YAML (storage credentials, owner metadata key, cache).",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON on stdout.",
    ),
) -> None:
    """Show which invocation wrote a blob.

    Storage credentials come from the settings file or JOBSIGHT_STORAGE__*
    environment variables.
    """
    from jobsight.diagnostics import CausalityResolver

    ref = StorageObjectRef.parse(blob)
    if ref is None:
        raise _fail(f"Expected CONTAINER/BLOB, got {blob!r}", json_output=json_output)

    current_id = None
    if invocation is not None:
        current_id = parse_invocation_id(invocation)
        if current_id is None:
            raise _fail(f"Invalid invocation id: {invocation!r}", json_output=json_output)

    config = _load_config(ctx, settings, json_output=json_output)
    store = _require_store(None, config, json_output=json_output)
    resolver = CausalityResolver(
        store,
        owner_metadata_key=config.causality.owner_metadata_key,
        cache_ttl_seconds=config.causality.cache_ttl_seconds,
    )

    try:
        record = resolver.resolve_owner(ref)
    except AzureError as e:
        logger.error("Storage request failed", container=ref.container, blob=ref.blob_name, error=str(e))
        raise _fail(f"Storage request failed: {e}", json_output=json_output) from None

    is_self_owned = None
    if current_id is not None:
        is_self_owned = record.written_by(current_id)

    if json_output:
        payload: dict[str, Any] = {
            "blob": str(ref),
            "status": record.status.value,
            "owner_id": str(record.owner_id) if record.owner_id is not None else None,
            "is_self_owned": is_self_owned,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(f"Blob: {ref}")
    match record.status:
        case OwnershipStatus.MISSING:
            typer.echo("Status: missing")
        case OwnershipStatus.NO_RECORD:
            typer.echo("Status: no ownership information")
        case OwnershipStatus.OWNED:
            typer.echo(f"Status: written by {record.owner_id}")
    if is_self_owned is not None:
        typer.echo(f"Written by this invocation: {'yes' if is_self_owned else 'no'}")


if __name__ == "__main__":
    app()
