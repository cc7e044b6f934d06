"""Defines the command-line interface for pyproptype.

This module uses the `click` library to expose the checkers to the shell: it
validates records stored in JSON or TOML files against a field declaration
file, lists the built-in kinds and validators, and manages the user
configuration.
"""
import json
import logging
import sys
from typing import Any, List, Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .core.checker import Location
from .core.config import Config
from .core.errors import DeclarationError, RecordValidationFailed
from .core.records import RecordReport, check_record
from .utils.files import load_declarations, load_records
from .validators.kinds import KINDS
from .validators.values import FACTORIES, PREDICATES

console = Console(emoji=True)

logger = logging.getLogger(__name__)


class AliasedGroup(click.Group):
    """A click Group that also resolves the short command aliases in `ALIASES`."""

    ALIASES = {"c": "check", "ls": "kinds"}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))


@click.group(cls=AliasedGroup, invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="pyproptype")
@click.option("--verbose", is_flag=True, help="Enable verbose output.")
@click.option("--debug", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool, debug: bool) -> None:
    """Validate named values in records against declared kinds and validators."""
    log_level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format='%(asctime)s - %(levelname)s - %(message)s')
    logger.debug("Debug mode enabled.")

    if ctx.invoked_subcommand is None:
        console.print("Use 'proptype check <records> --fields <declarations>' to validate records, or 'proptype --help' for more commands.")


def _display_reports(reports: List[RecordReport], blocked: bool) -> None:
    """Prints one table per record with errors, then a summary panel."""
    for index, report in enumerate(reports):
        if report.ok:
            continue
        table = Table(title=f"Record {index} ({report.entity_name})")
        table.add_column("Field", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Message")
        for field, error in report.errors:
            status = "[magenta]FAULT[/magenta]" if error.is_fault else "[red]INVALID[/red]"
            table.add_row(field, status, escape(error.message))
        console.print(table)

    failed = sum(1 for report in reports if not report.ok)
    total_errors = sum(len(report.errors) for report in reports)
    if failed:
        suffix = " Stopped early in block mode." if blocked else ""
        console.print(Panel(
            f"{failed} of {len(reports)} record(s) failed with {total_errors} error(s).{suffix}",
            style="red",
            title="Check Complete",
        ))
    else:
        console.print(Panel(f"All {len(reports)} record(s) are valid.", style="green", title="Check Complete"))


@main.command()
@click.argument("records_path", metavar="RECORDS", type=click.Path(exists=True, dir_okay=False))
@click.option("--fields", "fields_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Path to the field declaration file.")
@click.option("--entity", "entity_name", type=str, help="Entity name used in messages.")
@click.option("--location", type=click.Choice([loc.value for loc in Location]), help="Where the records come from.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), help="Path to a custom config file.")
@click.option("--json", "json_output", is_flag=True, help="Output results in JSON format.")
def check(records_path: str, fields_path: str, entity_name: Optional[str], location: Optional[str], config_path: Optional[str], json_output: bool) -> None:
    """Validate every record in RECORDS against the declared fields.

    RECORDS is a JSON or TOML file holding one record or a list of records.
    The command exits with status 1 if any record has errors, and with status
    2 if the input files cannot be used.
    """
    config_obj = Config(config_path=config_path)
    console.no_color = not config_obj.get("colors", True)
    if config_obj.get("verbose"):
        logging.getLogger("pyproptype").setLevel(logging.INFO)

    try:
        declarations = load_declarations(fields_path)
        records = load_records(records_path)
    except (DeclarationError, ValueError, OSError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(2)

    # --location is already a valid choice; the configured default may not be.
    location_value = location or config_obj.get("default_location", "prop")
    try:
        resolved_location = Location(location_value)
    except ValueError:
        known = ", ".join(loc.value for loc in Location)
        console.print(f"[red]Error: invalid default_location '{escape(str(location_value))}'; expected one of: {known}.[/red]")
        sys.exit(2)

    reports: List[RecordReport] = []
    blocked = False
    for record in records:
        try:
            reports.append(check_record(declarations, record, entity_name, resolved_location, config=config_obj))
        except RecordValidationFailed as e:
            reports.append(e.report)
            blocked = True
            break

    if json_output:
        click.echo(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        _display_reports(reports, blocked)

    if any(not report.ok for report in reports):
        sys.exit(1)


@main.command()
def kinds() -> None:
    """List the built-in kinds and validators."""
    table = Table(title="Built-in Kinds")
    table.add_column("Kind", style="cyan")
    table.add_column("Predicate")
    for label, kind in KINDS.items():
        table.add_row(label, kind.predicate.__name__)
    console.print(table)

    table = Table(title="Built-in Validators")
    table.add_column("Validator", style="cyan")
    table.add_column("Arguments")
    for name in PREDICATES:
        table.add_row(name, "-")
    for name in FACTORIES:
        table.add_row(name, "yes")
    console.print(table)


@main.command()
@click.argument("action", type=click.Choice(['get', 'set', 'list', 'reset']), required=True)
@click.argument("key", type=str, required=False)
@click.argument("value", type=str, required=False)
def config(action: str, key: Optional[str], value: Optional[str]) -> None:
    """Manage the pyproptype configuration.

    \b
    ACTION:
        get <key>         Get a configuration value.
        set <key> <value> Set a configuration value.
        list              List all current configuration values.
        reset             Reset the configuration to its default state.
    """
    config_obj = Config()
    if action == "list":
        console.print(Panel(json.dumps(config_obj.config, indent=2), title="Current Configuration"))
    elif action == "get":
        if not key:
            console.print("[red]Error: 'get' action requires a key.[/red]")
            sys.exit(1)
        click.echo(config_obj.get(key))
    elif action == "set":
        if not key or value is None:
            console.print("[red]Error: 'set' action requires a key and a value.[/red]")
            sys.exit(1)
        if value.lower() in ('true', 'false'):
            processed_value: Any = value.lower() == 'true'
        elif value.isdigit():
            processed_value = int(value)
        else:
            processed_value = value
        config_obj.set(key, processed_value)
        try:
            config_obj.save_user_config()
            console.print(f"[green]'{key}' set to '{processed_value}' and saved to user config.[/green]")
        except IOError as e:
            console.print(f"[red]Error saving configuration: {e}[/red]")
            sys.exit(1)
    elif action == "reset":
        if config_obj.reset_user_config():
            console.print("[green]Configuration reset to defaults.[/green]")
        else:
            console.print("[yellow]No user configuration file to reset.[/yellow]")


if __name__ == "__main__":
    main()
