"""check, functions and tokens commands."""

from pathlib import Path
from typing import Any

import click
import yaml

from vetter.config import Settings
from vetter.errors import VetterError
from vetter.expressions import FunctionRegistry, LexerError, ParseError
from vetter.tokens import PREDEFINED_TOKENS, ValidationToken
from vetter.vet import vet


def _load_value(text: str) -> Any:
    """Parse a YAML (or JSON) literal given on the command line."""
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise click.BadParameter(f"not valid YAML/JSON: {e}") from e


def _split_assignment(option: str, text: str) -> tuple[str, str]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise click.BadParameter(f"expected NAME=VALUE, got {text!r}", param_hint=option)
    return name.strip(), value


@click.command()
@click.argument("target")
@click.option("--value", "value_text", default=None, help="Value to validate, as YAML/JSON.")
@click.option(
    "--value-file",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the value to validate from a YAML/JSON file.",
)
@click.option("--name", default="current", show_default=True, help="How to refer to the value.")
@click.option("--var", "variables", multiple=True, metavar="NAME=VALUE",
              help="Bind a name for the target (YAML/JSON value). Repeatable.")
@click.option("--token", "token_defs", multiple=True, metavar="NAME=EXPR",
              help="Bind a name to a validation token expression. Repeatable.")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML settings file (defaults come from VETTER_* variables).",
)
def check(
    target: str,
    value_text: str | None,
    value_file: Path | None,
    name: str,
    variables: tuple[str, ...],
    token_defs: tuple[str, ...],
    config_path: Path | None,
):
    """Validate a value against TARGET.

    \b
    Examples:
        vetter check "INT_1 && . > 0" --value 5
        vetter check "shape" --var 'shape={"id": 0}' --value '{"id": "a"}'
    """
    if value_text is not None and value_file is not None:
        raise click.UsageError("Use either --value or --value-file, not both.")
    if value_file is not None:
        value = _load_value(value_file.read_text())
    else:
        value = _load_value(value_text) if value_text is not None else None

    context: dict[str, Any] = {}
    for item in variables:
        var_name, raw = _split_assignment("--var", item)
        context[var_name] = _load_value(raw)
    try:
        for item in token_defs:
            token_name, expression = _split_assignment("--token", item)
            context[token_name] = ValidationToken(expression)

        settings = Settings.from_yaml(config_path) if config_path else Settings.from_env()
        result = vet(target, value, name=name, context=context, settings=settings)
    except (VetterError, LexerError, ParseError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(2)

    if result.valid:
        click.echo(click.style(f"✓ `{result.name}` is valid.", fg="green"))
        return

    click.echo(click.style(result.text, fg="red"))
    raise SystemExit(1)


@click.command()
def functions():
    """List the functions available in expressions."""
    docs = FunctionRegistry.export_documentation()
    for category, entries in sorted(docs["by_category"].items()):
        click.echo(click.style(category, bold=True))
        for entry in entries:
            click.echo(f"  {entry['signature']:<32} {entry['description']}")


@click.command()
def tokens():
    """List the predefined validation tokens."""
    for token_name, token in sorted(PREDEFINED_TOKENS.items()):
        message = (token.message or "").replace("{name}", "<value>")
        click.echo(f"  {token_name:<14} {token.expression:<32} {message}")
