"""Interface en ligne de commande ``systemctl`` pour OpenRC.

Chaque sous-commande reproduit un verbe de systemctl en s'appuyant
sur ServiceManager. Les sorties standard restent au format de
systemctl (en anglais) pour les scripts qui les analysent ; les
erreurs passent par la chaîne ErrorHandlerChain (console + log).
"""

import os
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import click

from systemctl_openrc import __version__
from systemctl_openrc.commands.formatter import AnsiCommandFormatter
from systemctl_openrc.commands.runner import LinuxCommandExecutor
from systemctl_openrc.config.settings import Settings, load_settings
from systemctl_openrc.errors.base import ErrorHandlerChain
from systemctl_openrc.errors.console_handler import ConsoleErrorHandler
from systemctl_openrc.errors.exceptions import ApplicationError
from systemctl_openrc.errors.logger_handler import LoggerErrorHandler
from systemctl_openrc.logging.base import Logger, NullLogger
from systemctl_openrc.logging.file_logger import FileLogger
from systemctl_openrc.manager import (
    EnableResult,
    ServiceListing,
    ServiceManager,
)
from systemctl_openrc.openrc.base import ServiceAction
from systemctl_openrc.unit.names import normalize_service_name

CLI_NAME = "systemctl"

_ACTION_WORDS = {
    ServiceAction.START: ("Starting", "started"),
    ServiceAction.STOP: ("Stopping", "stopped"),
    ServiceAction.RESTART: ("Restarting", "restarted"),
    ServiceAction.RELOAD: ("Reloading", "reloaded"),
}


@dataclass
class AppContext:
    """Objets partagés par les sous-commandes (ctx.obj)."""

    settings: Settings
    logger: Logger
    manager: ServiceManager
    errors: ErrorHandlerChain


def build_logger(settings: Settings) -> Logger:
    """Logger fichier, ou NullLogger si le fichier est désactivé.

    Un répertoire de log inaccessible (utilisateur non root) ne doit
    pas empêcher les commandes de lecture : un avertissement est
    affiché et le log est désactivé.
    """
    if not settings.logging.file:
        return NullLogger()
    try:
        return FileLogger(settings.logging.file, settings.logging_config())
    except OSError as e:
        click.echo(
            f"Avertissement : log {settings.logging.file} désactivé ({e})",
            err=True,
        )
        return NullLogger()


def handle_errors(func: Callable) -> Callable:
    """Traduit les ApplicationError en message et code de sortie."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ApplicationError as e:
            app = click.get_current_context().find_object(AppContext)
            app.errors.handle_and_exit(e)

    return wrapper


def format_show(
    properties: Dict[str, str],
    requested: Iterable[str] = (),
    value_only: bool = False,
) -> str:
    """Met en forme les propriétés de ``show`` (clés triées).

    Args:
        properties: Propriétés disponibles.
        requested: Propriétés demandées via -p (vide = toutes).
        value_only: N'afficher que les valeurs (--value).
    """
    wanted = list(requested)
    if wanted:
        properties = {k: v for k, v in properties.items() if k in wanted}
    lines = [
        properties[key] if value_only else f"{key}={properties[key]}"
        for key in sorted(properties)
    ]
    return "".join(f"{line}\n" for line in lines)


def split_properties(values: Iterable[str]) -> List[str]:
    """Aplatit les valeurs de -p (répétées ou avec des virgules)."""
    names = []
    for value in values:
        names.extend(p.strip() for p in value.split(",") if p.strip())
    return names


def format_listing(row: ServiceListing) -> str:
    """Colonne STATUS de ``list`` avec la provenance du script."""
    if not row.converted:
        return f"{row.status} (not converted)"
    if row.unit_path is not None:
        return f"{row.status} (from {row.unit_path})"
    return row.status


def _report_enable(result: EnableResult) -> None:
    if result.conflict:
        click.echo(
            f"Service {result.name} has been manually modified. "
            "Use --force to overwrite."
        )
        click.echo(
            "Skipping conversion due to manual modifications. "
            "Enabling existing service."
        )
    elif result.converted:
        click.echo(f"Service {result.name} has been converted to OpenRC")
    else:
        click.echo(
            f"No systemd service file found for {result.name}, but "
            "OpenRC service exists. Enabling existing service."
        )
    click.echo(f"Service {result.name} has been enabled")
    if result.started:
        click.echo(f"Service {result.name} started")


@click.group(
    CLI_NAME,
    help="Translate systemctl commands to OpenRC.",
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (TOML or JSON).",
)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Echo the OpenRC commands being run on stderr.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], verbose: bool):
    """Point d'entrée du groupe : réglages, log et gestionnaire."""
    errors = ErrorHandlerChain([ConsoleErrorHandler()])
    try:
        settings = load_settings(config_path)
    except ApplicationError as e:
        errors.handle_and_exit(e)

    logger = build_logger(settings)
    errors.add_handler(LoggerErrorHandler(logger))
    executor = LinuxCommandExecutor(
        logger=logger,
        default_timeout=settings.openrc.command_timeout,
        console_formatter=AnsiCommandFormatter() if verbose else None,
    )
    ctx.obj = AppContext(
        settings=settings,
        logger=logger,
        manager=ServiceManager.from_settings(settings, logger, executor),
        errors=errors,
    )


pass_app = click.make_pass_decorator(AppContext)


# ----------------------------------------------------------------------
# enable / disable
# ----------------------------------------------------------------------


@cli.command("enable", help="Convert and enable one or more services.")
@click.argument("services", nargs=-1, required=True)
@click.option("--now", is_flag=True, help="Start the services as well.")
@click.option(
    "-f", "--force", is_flag=True,
    help="Overwrite manually modified scripts.",
)
@pass_app
@click.pass_context
def enable_command(
    ctx: click.Context,
    app: AppContext,
    services: tuple[str, ...],
    now: bool,
    force: bool,
):
    failures = 0
    for raw in services:
        try:
            result = app.manager.enable(raw, now=now, force=force)
        except ApplicationError as e:
            app.errors.handle(e)
            failures += 1
            continue
        _report_enable(result)
    if failures:
        ctx.exit(1)


@cli.command("disable", help="Disable one or more services.")
@click.argument("services", nargs=-1, required=True)
@click.option("--now", is_flag=True, help="Stop the services first.")
@pass_app
@click.pass_context
def disable_command(
    ctx: click.Context,
    app: AppContext,
    services: tuple[str, ...],
    now: bool,
):
    failures = 0
    for raw in services:
        try:
            name = app.manager.disable(raw, now=now)
        except ApplicationError as e:
            app.errors.handle(e)
            failures += 1
            continue
        click.echo(f"Service {name} has been disabled")
    if failures:
        ctx.exit(1)


# ----------------------------------------------------------------------
# start / stop / restart / reload / status
# ----------------------------------------------------------------------


def _register_action(action: ServiceAction) -> None:
    doing, done = _ACTION_WORDS[action]

    @cli.command(str(action), help=f"{action.capitalize()} a service.")
    @click.argument("service")
    @pass_app
    @handle_errors
    def command(app: AppContext, service: str):
        name = normalize_service_name(service)
        click.echo(f"{doing} service {name}...")
        app.manager.control(service, action)
        click.echo(f"Service {name} {done}")


for _action in _ACTION_WORDS:
    _register_action(_action)


@cli.command("status", help="Show the status of a service.")
@click.argument("service")
@pass_app
@handle_errors
def status_command(app: AppContext, service: str):
    result = app.manager.status(service)
    if result.output:
        click.echo(result.output, nl=not result.output.endswith("\n"))
    if result.exit_code != 0:
        name = normalize_service_name(service)
        click.echo(f"Service {name} might be stopped or has issues")


@cli.command("is-active", help="Print whether a service is active.")
@click.argument("service")
@pass_app
@click.pass_context
@handle_errors
def is_active_command(ctx: click.Context, app: AppContext, service: str):
    result = app.manager.status(service)
    click.echo(str(result.state))
    if result.exit_code != 0:
        ctx.exit(result.exit_code if result.exit_code > 0 else 1)


@cli.command("is-enabled", help="Print whether a service is enabled.")
@click.argument("service")
@pass_app
@click.pass_context
@handle_errors
def is_enabled_command(ctx: click.Context, app: AppContext, service: str):
    if app.manager.is_enabled(service):
        click.echo("enabled")
    else:
        click.echo("disabled")
        ctx.exit(1)


# ----------------------------------------------------------------------
# show / list
# ----------------------------------------------------------------------


@cli.command("show", help="Show properties of a service or the manager.")
@click.argument("service", required=False)
@click.option(
    "-p", "--property", "properties", multiple=True,
    help="Only show these properties (repeatable, comma separated).",
)
@click.option("--value", is_flag=True, help="Only print the values.")
@pass_app
@handle_errors
def show_command(
    app: AppContext,
    service: Optional[str],
    properties: tuple[str, ...],
    value: bool,
):
    if service is None:
        values = app.manager.manager_properties()
    else:
        values = app.manager.service_properties(service)
    click.echo(
        format_show(values, split_properties(properties), value), nl=False
    )


@cli.command("list", help="List services and their OpenRC status.")
@click.option(
    "-a", "--all", "show_all", is_flag=True,
    help="Include disabled OpenRC services.",
)
@pass_app
@handle_errors
def list_command(app: AppContext, show_all: bool):
    click.echo(f"{'SERVICE':<30} STATUS")
    for row in app.manager.list_services(show_all):
        click.echo(f"{row.name:<30} {format_listing(row)}")


cli.add_command(list_command, "ls")


@cli.command("list-units", help="List units with their active state.")
@click.option(
    "-a", "--all", "show_all", is_flag=True,
    help="Include disabled and inactive units.",
)
@click.option("--type", "unit_type", default=None, help="Unit type.")
@click.option("--state", default=None, help="Active or sub state.")
@pass_app
@handle_errors
def list_units_command(
    app: AppContext,
    show_all: bool,
    unit_type: Optional[str],
    state: Optional[str],
):
    row_format = "{:<35} {:<10} {:<7} {:<7} {}"
    click.echo(row_format.format(
        "UNIT", "LOAD", "ACTIVE", "SUB", "DESCRIPTION"
    ))
    for row in app.manager.list_units(show_all, unit_type, state):
        click.echo(row_format.format(
            row.unit, row.load, row.active, row.sub, row.description
        ))


@cli.command("list-unit-files", help="List unit files and their state.")
@click.option("--type", "unit_type", default=None, help="Unit type.")
@click.option(
    "--state", default=None, help="enabled, disabled or static."
)
@pass_app
@handle_errors
def list_unit_files_command(
    app: AppContext, unit_type: Optional[str], state: Optional[str]
):
    click.echo(f"{'UNIT FILE':<50} STATE")
    for row in app.manager.list_unit_files(unit_type, state):
        click.echo(f"{row.unit_file:<50} {row.state}")


# ----------------------------------------------------------------------
# edit / daemon-reload / version
# ----------------------------------------------------------------------


@cli.command("edit", help="Edit an installed OpenRC script.")
@click.argument("service")
@pass_app
@handle_errors
def edit_command(app: AppContext, service: str):
    result = app.manager.edit(service, dict(os.environ))
    if not result.modified:
        click.echo(f"Service {result.name} was not modified")
    elif result.restamped:
        click.echo(
            f"Service {result.name} has been modified and saved "
            "(timestamp updated)"
        )
    else:
        click.echo(f"Service {result.name} has been modified and saved")


@cli.command("daemon-reload", help="No-op: OpenRC has no daemon to reload.")
def daemon_reload_command():
    click.echo("The 'daemon-reload' command is not needed in OpenRC.")
    click.echo(
        "OpenRC reads service scripts directly each time they are used."
    )
    click.echo("No action was performed.")


@cli.command("version", help="Print the version.")
def version_command():
    click.echo(f"{CLI_NAME} (alpine translator) version {__version__}")


def main() -> None:
    """Point d'entrée du script ``systemctl``."""
    try:
        cli(prog_name=CLI_NAME)
    except Exception as e:
        ErrorHandlerChain([ConsoleErrorHandler()]).handle_and_exit(e)
