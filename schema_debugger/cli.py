import importlib
import json
import logging
from pathlib import Path
from typing import Any

import typer
from dotenv import load_dotenv

from schema_debugger.config import DebugOptions
from schema_debugger.debugger import as_schema, debug
from schema_debugger.errors import SchemaImportError
from schema_debugger.loggy import setup_logging
from schema_debugger.report import format_result
from schema_debugger.tree import is_schema_node

logger = logging.getLogger(__name__)

app = typer.Typer()


def load_target(target: str) -> Any:
    """
    Import a schema from a ``package.module:attribute`` string.

    Args:
        target: Import path of the schema.

    Returns:
        Any: The imported schema, with types and annotations wrapped.

    Raises:
        SchemaImportError: If the module or attribute cannot be found, or
            the attribute is not usable as a schema.
    """
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise SchemaImportError(f"Expected 'module:attribute', got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise SchemaImportError(f"Cannot import module '{module_name}': {exc}") from exc
    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise SchemaImportError(
                f"Module '{module_name}' has no attribute '{attr}'"
            ) from exc
    schema = as_schema(obj)
    if not is_schema_node(schema):
        raise SchemaImportError(f"'{target}' is not a schema or type annotation")
    return schema


@app.command("debug")
def debug_cmd(
    target: str = typer.Argument(
        ..., help="Schema to debug as 'package.module:Schema'"
    ),
    values_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON file with the value to check"
    ),
    max_depth: int | None = typer.Option(
        None, "--max-depth", help="Maximum tree depth (default 10)"
    ),
    abort_early: bool | None = typer.Option(
        None, "--abort-early/--collect-all", help="Stop at the first failure"
    ),
    no_tree: bool = typer.Option(
        False, "--no-tree", help="Skip building the validation tree"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Explain why a JSON value passes or fails a schema."""
    load_dotenv()
    setup_logging(logging.DEBUG if verbose else logging.WARNING)

    try:
        schema = load_target(target)
    except SchemaImportError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2)

    options = DebugOptions.from_env(
        max_depth=max_depth,
        abort_early=abort_early,
        make_validation_tree=False if no_tree else None,
    )
    try:
        values = json.loads(values_file.read_text())
    except json.JSONDecodeError as exc:
        typer.echo(f"Invalid JSON in {values_file}: {exc}", err=True)
        raise typer.Exit(code=2)
    logger.info(f"Debugging {target} against {values_file}")

    result = debug(schema, values, options)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        typer.echo(format_result(result))

    if not result.is_valid:
        raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """Schema validation debugger."""


if __name__ == "__main__":
    app()
