"""
CLI integration for data tier generation.

Provides the ``generate`` and ``languages`` subcommands.
"""

import argparse
from pathlib import Path

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ..logging_config import get_logger
from ..utils import SchemaLoadError, load_schema
from . import (
    GeneratorConfig,
    GeneratorError,
    generate_data_tier,
    load_config,
    write_data_tier,
)
from .core.config import ConfigError, get_config_manager
from .core.procedures import operation_set
from .core.sink import OutputError
from .registry import (
    DEFAULT_LANGUAGE,
    RegistryError,
    is_language_supported,
    list_all_language_info,
)

logger = get_logger(__name__)


# Initialize rich console
console = Console()


def create_generate_subparser(subparsers) -> argparse.ArgumentParser:
    """
    Create the ``generate`` subcommand parser.

    For use with: dtgen generate SCHEMA [options]
    """
    parser = subparsers.add_parser(
        "generate",
        help="Generate stored procedures and data access code",
        description="Generate a data tier from a database schema description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dtgen generate schema.json -o out
  dtgen generate schema.json -l python --prefix usp_ --single-file
  dtgen generate https://example.com/schema.json --grant-user app_user
        """.strip(),
    )

    parser.add_argument("schema", help="Schema JSON file or http(s) URL")

    parser.add_argument(
        "--output", "-o", help="Output directory (default: config output_path)"
    )
    parser.add_argument(
        "--language",
        "-l",
        help=f"Host language for generated code (default: {DEFAULT_LANGUAGE})",
    )
    parser.add_argument("--config", help="Configuration file path (JSON)")

    naming_group = parser.add_argument_group("naming")
    naming_group.add_argument(
        "--prefix", dest="procedure_prefix", help="Stored procedure name prefix"
    )
    naming_group.add_argument("--access-suffix", help="Access class name suffix")
    naming_group.add_argument("--transfer-suffix", help="Transfer class name suffix")
    naming_group.add_argument("--namespace", help="Namespace of generated code")
    naming_group.add_argument("--project-name", help="Generated project name")

    sql_group = parser.add_argument_group("sql")
    mode = sql_group.add_mutually_exclusive_group()
    mode.add_argument(
        "--single-file",
        dest="output_mode",
        action="store_const",
        const="single-file",
        help="Write every procedure into one SQL file",
    )
    mode.add_argument(
        "--multi-file",
        dest="output_mode",
        action="store_const",
        const="multi-file",
        help="Write one SQL file per procedure",
    )
    sql_group.add_argument(
        "--grant-user",
        dest="grant_principal",
        metavar="NAME",
        help="Grant execute permissions to this login/user",
    )
    sql_group.add_argument(
        "--database", dest="database_name", help="Override the database name"
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        "--sql-only", action="store_true", help="Only generate stored procedures"
    )
    scope.add_argument(
        "--code-only", action="store_true", help="Only generate host-language code"
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show generation metadata and decided operations"
    )

    parser.set_defaults(func=_handle_generate_command)
    return parser


def create_languages_subparser(subparsers) -> argparse.ArgumentParser:
    """Create the ``languages`` subcommand parser."""
    parser = subparsers.add_parser(
        "languages", help="List supported host languages"
    )
    parser.set_defaults(func=_handle_languages_command)
    return parser


def _build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Merge defaults, the config file and command-line overrides."""
    overrides = {
        "language": args.language,
        "output_path": args.output,
        "procedure_prefix": args.procedure_prefix,
        "access_suffix": args.access_suffix,
        "transfer_suffix": args.transfer_suffix,
        "namespace": args.namespace,
        "project_name": args.project_name,
        "output_mode": args.output_mode,
        "grant_principal": args.grant_principal,
        "database_name": args.database_name,
    }
    return load_config(custom_config=overrides, config_file=args.config)


def _handle_generate_command(args: argparse.Namespace) -> int:
    """Handle the generate subcommand."""
    try:
        config = _build_config(args)

        if not is_language_supported(config.language):
            console.print(f"[red]✗ Language '{config.language}' is not supported[/red]")
            console.print("[dim]Use 'dtgen languages' to see available options[/dim]")
            return 1

        for warning in get_config_manager().validate_config(config):
            console.print(f"[yellow]⚠️  {warning}[/yellow]")

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            load_task = progress.add_task("[cyan]Loading schema...", total=None)
            database = load_schema(args.schema)
            progress.remove_task(load_task)

            gen_task = progress.add_task(
                f"[green]Generating {config.language} data tier...", total=None
            )
            result = generate_data_tier(
                database, config, sql_only=args.sql_only, code_only=args.code_only
            )
            progress.remove_task(gen_task)

        if not result.success:
            console.print(f"[red]✗ Generation failed:[/red] {result.error_message}")
            return 1

        written = write_data_tier(result, config)
        console.print(
            f"[green]✓[/green] Wrote {len(written)} files to "
            f"[cyan]{Path(config.output_path)}[/cyan]"
        )

        if args.verbose and result.metadata:
            _print_metadata(result.metadata)
            _print_operations(database)

        if result.warnings:
            console.print("\n[yellow]⚠️  Warnings:[/yellow]")
            for warning in result.warnings:
                console.print(f"  [yellow]•[/yellow] {warning}")
            console.print()

        return 0

    except (SchemaLoadError, FileNotFoundError) as e:
        console.print(f"[red]✗ Could not load schema:[/red] {e}")
        return 1
    except (ConfigError, RegistryError, GeneratorError) as e:
        console.print(f"[red]✗[/red] {e}")
        return 1
    except OutputError as e:
        console.print(f"[red]✗ Output failed:[/red] {e}")
        return 1


def _print_metadata(metadata: dict):
    metadata_table = Table(
        title="📊 Generation Metadata",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    console.print()
    console.print(metadata_table)


def _print_operations(database):
    operations_table = Table(
        title="🗂️  Data Access Operations",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    operations_table.add_column("Table", style="bold")
    operations_table.add_column("Operations", style="green")

    for table in database.tables:
        operations_table.add_row(table.name, ", ".join(operation_set(table)))

    console.print()
    console.print(operations_table)


def _handle_languages_command(args: argparse.Namespace) -> int:
    """List supported languages with details."""
    try:
        language_info = list_all_language_info()
    except RegistryError as e:
        console.print(f"[red]✗ Error listing languages:[/red] {e}")
        return 1

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        label = f"🔧 {lang_name}" + (" [dim](default)[/dim]" if info["default"] else "")
        table.add_row(label, info["file_extension"], info["class"], aliases)

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] dtgen generate [dim]schema.json[/dim] "
            "--language [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0
