#!/usr/bin/env python3
"""
vg: CLI for the vaultgraph link graph

Usage:
    vg links note.md               # Wikilinks in a note
    vg resolve "Projects/Alpha"    # Path a link target opens
    vg backlinks Alpha             # Notes linking to Alpha
    vg outgoing note.md            # Links of a note, resolved
    vg tree                        # Folder/note tree of the vault
"""

from __future__ import annotations

import difflib
import json
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any, NoReturn

import click
from click.exceptions import ClickException, UsageError

from . import __version__ as VAULTGRAPH_VERSION
from .errors import ErrorCode, VaultGraphError, format_error_json
from .models import FileTree, FolderEntry, TreeEntry

# ─────────────────────────────────────────────────────────────────────────────
# Output Formatting
# ─────────────────────────────────────────────────────────────────────────────


def format_table(rows: list[dict], columns: list[str], max_widths: dict | None = None) -> str:
    """Format rows as a simple table."""
    if not rows:
        return ""

    max_widths = max_widths or {}
    widths = {col: len(col) for col in columns}

    def cell(row: dict, col: str) -> str:
        val = str(row.get(col, ""))
        limit = max_widths.get(col, 50)
        if len(val) > limit:
            val = val[: limit - 3] + "..."
        return val

    for row in rows:
        for col in columns:
            widths[col] = max(widths[col], len(cell(row, col)))

    header = "  ".join(col.upper().ljust(widths[col]) for col in columns)
    separator = "  ".join("-" * widths[col] for col in columns)

    lines = [header, separator]
    for row in rows:
        lines.append("  ".join(cell(row, col).ljust(widths[col]) for col in columns))

    return "\n".join(lines)


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(data)


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def _handle_error(
    ctx: click.Context,
    error: Exception,
    fallback_message: str | None = None,
    exit_code: int = 1,
) -> NoReturn:
    """Handle an error with optional JSON output.

    If --json-errors is enabled, outputs structured JSON error.
    Otherwise, outputs human-readable error message.
    """
    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, VaultGraphError):
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
            suggestion = error.details.get("suggestion") if error.details else None
            if suggestion:
                click.echo(f"Hint: {suggestion}", err=True)
    else:
        message = fallback_message or str(error)
        if json_errors:
            click.echo(format_error_json(_infer_error_code(error), message), err=True)
        else:
            click.echo(f"Error: {message}", err=True)

    sys.exit(exit_code)


def _infer_error_code(error: Exception) -> ErrorCode:
    """Map plain exceptions to error codes."""
    if isinstance(error, (OSError, UnicodeDecodeError)):
        return ErrorCode.FILE_READ_ERROR
    return ErrorCode.INTERNAL_ERROR


def get_error_code_for_exception(exc: Exception) -> ErrorCode:
    """Map Click exceptions to error codes."""
    # MissingParameter is a BadParameter subclass
    if isinstance(exc, click.MissingParameter):
        return ErrorCode.MISSING_ARGUMENT
    elif isinstance(exc, click.BadParameter):
        return ErrorCode.INVALID_ARGUMENT
    elif isinstance(exc, click.NoSuchOption):
        return ErrorCode.UNKNOWN_OPTION
    elif isinstance(exc, UsageError):
        return ErrorCode.USAGE_ERROR
    elif isinstance(exc, ClickException):
        return ErrorCode.CLI_ERROR
    return ErrorCode.INTERNAL_ERROR


# ─────────────────────────────────────────────────────────────────────────────
# JSON Error Handling
# ─────────────────────────────────────────────────────────────────────────────


class JsonErrorGroup(click.Group):
    """Click group that reports errors as JSON when --json-errors is given.

    Click rejects bad arguments before any vg callback runs, so those errors
    are caught here rather than in ``_handle_error``. An unknown command name
    gets the closest vg command as a suggestion.
    """

    def resolve_command(self, ctx, args):
        """Suggest the closest command for a misspelled name."""
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            cmd_name = args[0] if args else ""
            suggestion = _closest_command(cmd_name, self.list_commands(ctx))
            if suggestion and "No such command" in str(e):
                raise UsageError(f"No such command '{cmd_name}'. Did you mean '{suggestion}'?")
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except ClickException as e:
            if not ctx.params.get("json_errors"):
                raise
            _echo_click_error(e)
            raise SystemExit(1)

    def main(
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        """Run the CLI, rerouting parse errors to JSON under --json-errors.

        ``vg backlinks Alpha --json-errors`` is accepted like
        ``vg --json-errors backlinks Alpha``: the flag is moved in front of
        the command so Click treats it as the group option it is.
        """
        argv = list(args) if args is not None else list(sys.argv[1:])
        if "--json-errors" not in argv:
            return super().main(args, prog_name, complete_var, standalone_mode, **extra)

        argv = _hoist_flag(argv, "--json-errors")
        try:
            # Without standalone mode Click raises parse errors instead of
            # printing them, and returns ctx.exit() codes instead of exiting.
            rv = super().main(argv, prog_name, complete_var, standalone_mode=False, **extra)
        except ClickException as e:
            _echo_click_error(e)
            raise SystemExit(1)
        except SystemExit:
            raise
        except Exception as e:
            click.echo(format_error_json(ErrorCode.INTERNAL_ERROR, str(e)), err=True)
            raise SystemExit(1)

        # `vg resolve X --json` exits 1 through ctx.exit(1) when nothing matches
        if isinstance(rv, int) and rv != 0:
            raise SystemExit(rv)
        return rv


def _closest_command(name: str, commands: list[str]) -> str | None:
    if not name:
        return None
    matches = difflib.get_close_matches(name, commands, n=1, cutoff=0.6)
    return matches[0] if matches else None


def _hoist_flag(argv: list[str], flag: str) -> list[str]:
    return [flag] + [a for a in argv if a != flag]


def _echo_click_error(error: ClickException) -> None:
    code = get_error_code_for_exception(error)
    click.echo(format_error_json(code, error.format_message()), err=True)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _require_vault(ctx: click.Context) -> Path:
    """Return the configured vault root or exit with a helpful error."""
    from .config import ConfigurationError, get_vault_root

    try:
        vault = get_vault_root(ctx.obj.get("vault") if ctx.obj else None)
    except ConfigurationError as e:
        _handle_error(ctx, VaultGraphError(ErrorCode.VAULT_NOT_CONFIGURED, str(e)))

    if not vault.is_dir():
        _handle_error(
            ctx,
            VaultGraphError(
                ErrorCode.VAULT_NOT_FOUND,
                f"Vault not found: {vault}",
                {"suggestion": "Check --vault or VAULTGRAPH_VAULT_ROOT"},
            ),
        )
    return vault


def _read_note(ctx: click.Context, stream: IO[str]) -> str:
    try:
        return stream.read()
    except (OSError, UnicodeDecodeError) as e:
        name = getattr(stream, "name", "<stdin>")
        _handle_error(
            ctx,
            VaultGraphError(ErrorCode.FILE_READ_ERROR, f"Could not read {name}: {e}"),
        )


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group(cls=JsonErrorGroup)
@click.version_option(version=VAULTGRAPH_VERSION, prog_name="vg")
@click.option(
    "--vault",
    type=click.Path(file_okay=False, path_type=Path),
    help="Vault root (default: $VAULTGRAPH_VAULT_ROOT)",
)
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="VAULTGRAPH_QUIET",
    help="Suppress warnings, show only errors and essential output",
)
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, json_errors: bool, quiet: bool):
    """vg: wikilinks, backlinks and the note tree of a markdown vault.

    \b
    Quick start:
      vg --vault ~/notes tree          # Browse structure
      vg links note.md                 # Links inside a note
      vg resolve "Projects/Alpha"      # Which file a link opens
      vg backlinks Alpha               # Who links to Alpha

    \b
    For programmatic use:
      vg tree --json                   # Every command takes --json
      vg --json-errors resolve X       # Errors as JSON with error codes
    """
    from ._logging import configure_logging, set_quiet_mode

    configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["vault"] = vault
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet

    if quiet:
        set_quiet_mode(True)


# ─────────────────────────────────────────────────────────────────────────────
# Links Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def links(ctx: click.Context, file: IO[str], as_json: bool):
    """List the wikilinks in a note (FILE, or stdin with '-').

    \b
    Examples:
      vg links Projects/Alpha.md
      echo "see [[Beta#Intro|beta]]" | vg links -
    """
    from .parser import parse_links

    parsed = parse_links(_read_note(ctx, file))

    if as_json:
        output(parsed.model_dump(), as_json=True)
        return

    if not parsed.links:
        click.echo("No links found.")
        return

    rows = [
        {
            "target": link.target,
            "heading": link.heading or "",
            "display": link.display_text or "",
            "span": f"{link.span.start}-{link.span.end}",
        }
        for link in parsed.links
    ]
    click.echo(format_table(rows, ["target", "heading", "display", "span"]))
    click.echo(
        f"\n{_plural(len(parsed.links), 'link')} to "
        f"{_plural(len(parsed.referenced_notes), 'note')}"
    )


# ─────────────────────────────────────────────────────────────────────────────
# Resolve Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def resolve(ctx: click.Context, target: str, as_json: bool):
    """Print the note file a link target opens.

    Exits with status 1 when no note matches.

    \b
    Examples:
      vg resolve Alpha
      vg resolve "Projects/Alpha" --json
    """
    from .resolver import resolve_note

    vault = _require_vault(ctx)
    resolved = resolve_note(vault, target)

    if as_json:
        output({"target": target, "path": str(resolved) if resolved is not None else None}, as_json=True)
        if resolved is None:
            ctx.exit(1)
        return

    if resolved is None:
        _handle_error(
            ctx,
            VaultGraphError(
                ErrorCode.NOTE_NOT_FOUND,
                f"No note matches '{target}'",
                {"suggestion": "Run 'vg tree' to see the notes in this vault"},
            ),
        )
    click.echo(str(resolved))


# ─────────────────────────────────────────────────────────────────────────────
# Backlinks Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("note")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def backlinks(ctx: click.Context, note: str, as_json: bool):
    """List the notes that link to NOTE (a name, without .md).

    \b
    Examples:
      vg backlinks Alpha
      vg backlinks Alpha --json
    """
    from .backlinks import find_backlinks

    vault = _require_vault(ctx)
    groups = find_backlinks(vault, note)

    if as_json:
        output([group.model_dump() for group in groups], as_json=True)
        return

    if not groups:
        click.echo(f"No backlinks to '{note}'.")
        return

    for group in groups:
        source = Path(group.source_path)
        try:
            shown = source.relative_to(vault).as_posix()
        except ValueError:
            shown = group.source_path
        click.echo(f"{group.source_name} ({shown})")
        for link in group.links:
            click.echo(f"    {link.raw}")

    total = sum(len(group.links) for group in groups)
    click.echo(f"\n{_plural(total, 'link')} from {_plural(len(groups), 'note')}")


# ─────────────────────────────────────────────────────────────────────────────
# Outgoing Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command()
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def outgoing(ctx: click.Context, file: IO[str], as_json: bool):
    """List the links of a note grouped by target, with where each resolves.

    \b
    Examples:
      vg outgoing Projects/Alpha.md
    """
    from .resolver import outgoing_links

    vault = _require_vault(ctx)
    grouped = outgoing_links(vault, _read_note(ctx, file))

    if as_json:
        output([entry.model_dump() for entry in grouped], as_json=True)
        return

    if not grouped:
        click.echo("No outgoing links - use [[note-name]] to link to other notes")
        return

    rows = []
    for entry in grouped:
        if entry.resolved_path is None:
            resolved = "(missing)"
        else:
            try:
                resolved = Path(entry.resolved_path).relative_to(vault).as_posix()
            except ValueError:
                resolved = entry.resolved_path
        rows.append({"target": entry.target, "links": len(entry.links), "note": resolved})

    click.echo(format_table(rows, ["target", "links", "note"], {"note": 60}))
    total = sum(len(entry.links) for entry in grouped)
    click.echo(f"\n{_plural(total, 'link')} to {_plural(len(grouped), 'note')}")


# ─────────────────────────────────────────────────────────────────────────────
# Tree Command
# ─────────────────────────────────────────────────────────────────────────────


def format_tree(entries: list[TreeEntry], prefix: str = "") -> str:
    """Format tree entries as an ASCII tree."""
    lines = []
    for i, entry in enumerate(entries):
        is_last = i == len(entries) - 1
        connector = "└── " if is_last else "├── "

        if isinstance(entry, FolderEntry):
            lines.append(f"{prefix}{connector}{entry.name}/")
            extension = "    " if is_last else "│   "
            lines.append(format_tree(entry.children, prefix + extension))
        else:
            lines.append(f"{prefix}{connector}{entry.name}")

    return "\n".join(line for line in lines if line)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tree(ctx: click.Context, as_json: bool):
    """Display the folders and notes of the vault.

    Folders come first at every level, then notes, each sorted by name.

    \b
    Examples:
      vg tree
      vg --vault ~/notes tree --json
    """
    from .tree import build_file_tree

    vault = _require_vault(ctx)
    file_tree: FileTree = build_file_tree(vault)

    if as_json:
        output(file_tree.model_dump(), as_json=True)
        return

    formatted = format_tree(file_tree.root)
    if formatted:
        click.echo(formatted)
    click.echo(
        f"\n{_plural(file_tree.total_folders, 'folder')}, "
        f"{_plural(file_tree.total_notes, 'note')}"
    )


if __name__ == "__main__":
    cli()
