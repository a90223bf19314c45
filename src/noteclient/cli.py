"""CLI entrypoint for noteclient diagnostics."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import click
from pydantic import ValidationError

from noteclient.client import NoteClient
from noteclient.config.models import ClientSettings
from noteclient.config.store import SettingsStore
from noteclient.errors import IdentityMissingError, StorageReadError
from noteclient.paths import settings_path
from noteclient.runtime_logging import configure_runtime_logging
from noteclient.storage import ACTIVE_FILE
from noteclient.version import __version__
from noteclient.versioning import installed_versions

SETTINGS_STORE_KEY = "noteclient.settings_store"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--settings", "settings_file", type=click.Path(dir_okay=False), help="Settings file to use")
@click.option("--state-dir", help="Override the client state directory")
@click.option("--log-level", help="Runtime log level (off, error, warning, info, debug)")
@click.pass_context
def main(ctx: click.Context, settings_file: str | None, state_dir: str | None, log_level: str | None) -> None:
    """noteclient: telemetry queue and upgrade runner for the note extension."""
    configure_runtime_logging(level=log_level)
    store = SettingsStore(Path(settings_file).expanduser() if settings_file else None)
    settings = store.load()
    ctx.meta[SETTINGS_STORE_KEY] = store
    if state_dir:
        settings = settings.model_copy(update={"state_dir": str(Path(state_dir).expanduser())})
    ctx.obj = settings


def _echo_json(payload: object) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


@main.command()
@click.option("--extension-path", type=click.Path(file_okay=False), help="Directory of the running extension")
@click.option("--version", "current_version", default=__version__, show_default=True)
@click.pass_obj
def start(settings: ClientSettings, extension_path: str | None, current_version: str) -> None:
    """Run the startup sequence: identity, upgrades, heartbeat."""
    path = Path(extension_path).expanduser().resolve() if extension_path else None
    client = NoteClient(settings, current_version=current_version, extension_path=path)
    report = asyncio.run(client.start())
    payload: dict[str, object] = {"first_run": report.first_run}
    if report.upgrade is not None:
        payload["upgrade"] = {
            "from": report.upgrade.previous_version,
            "to": report.upgrade.current_version,
            "steps": [
                {"version": outcome.version, "name": outcome.name, "ok": outcome.ok}
                for outcome in report.upgrade.outcomes
            ],
        }
    if report.heartbeat is not None:
        payload["heartbeat_sent"] = report.heartbeat.sent
    _echo_json(payload)


@main.command()
@click.argument("action")
@click.pass_obj
def record(settings: ClientSettings, action: str) -> None:
    """Record ACTION and attempt delivery."""
    client = NoteClient(settings)
    result = asyncio.run(client.record(action))
    if result is None:
        click.echo("recorded")
        return
    _echo_json({"delivered": result.delivered, "pending": result.pending, "ok": result.ok})


@main.command()
@click.pass_obj
def flush(settings: ClientSettings) -> None:
    """Attempt delivery of every pending action."""
    client = NoteClient(settings)
    result = asyncio.run(client.flush())
    _echo_json({"delivered": result.delivered, "pending": result.pending, "ok": result.ok})
    if not result.ok:
        raise click.ClickException(f"Flush failed: {result.error}")


@main.command()
@click.pass_obj
def status(settings: ClientSettings) -> None:
    """Show client id, pending actions and last heartbeat."""
    client = NoteClient(settings)
    try:
        cid: str | None = client.identity.get_id()
    except IdentityMissingError:
        cid = None
    try:
        last_active = client.heartbeat.last_active()
    except StorageReadError:
        last_active = None
    pending = client.actions.load_or_empty()
    _echo_json(
        {
            "state_dir": str(client.storage.root),
            "cid": cid,
            "pending": {name: len(stamps) for name, stamps in pending.items()},
            "last_active": last_active,
            "files": client.storage.list(),
            "has_active_marker": client.storage.exists(ACTIVE_FILE),
        }
    )


@main.command("upgrade-plan")
@click.option("--from", "from_version", help="Previously installed version")
@click.option("--to", "to_version", default=__version__, show_default=True)
@click.option("--extensions-dir", type=click.Path(file_okay=False), help="Infer --from from installed directories")
@click.option("--identifier", help="Publisher-qualified extension id used with --extensions-dir")
@click.pass_obj
def upgrade_plan(
    settings: ClientSettings,
    from_version: str | None,
    to_version: str,
    extensions_dir: str | None,
    identifier: str | None,
) -> None:
    """List the upgrade steps that would run between two versions."""
    client = NoteClient(settings, current_version=to_version)
    runner = client.upgrade_runner()
    if from_version:
        installed = [from_version, to_version]
    elif extensions_dir:
        identifier = identifier or settings.extension.identifier
        if not identifier:
            raise click.UsageError("Pass --identifier or set extension.identifier")
        installed = installed_versions(Path(extensions_dir), identifier)
    else:
        raise click.UsageError("Pass --from or --extensions-dir")

    previous, steps = runner.plan(installed)
    _echo_json(
        {
            "from": previous,
            "to": to_version,
            "steps": [{"version": step.version, "name": step.name} for step in steps],
            "registered": len(client.registry),
        }
    )


@main.group()
def config() -> None:
    """Inspect or change persisted settings."""


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Set dotted KEY (e.g. collector.url) to VALUE; JSON values are decoded."""
    store: SettingsStore = ctx.meta[SETTINGS_STORE_KEY]
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        parsed = value
    try:
        updated = store.update(key, parsed)
    except KeyError as exc:
        raise click.ClickException(str(exc.args[0]))
    except ValidationError as exc:
        raise click.ClickException(f"Invalid value for {key}: {exc.errors()[0]['msg']}")
    _echo_json(updated.model_dump(mode="json"))


@main.command("settings-path")
def settings_path_command() -> None:
    """Print settings file path."""
    click.echo(str(settings_path()))


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "noteclient",
        "version": __version__,
        "description": "Telemetry action queue and upgrade runner for the note extension",
    }
    _echo_json(payload)


if __name__ == "__main__":
    main()
