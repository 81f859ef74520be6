"""Command-line interface for gql-qla."""

import json
import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from . import config as config_mod
from .core.errors import IntrospectionError, JSONSyntaxError, QlaError
from .core.formatter import format_graphql, format_json, validate_balance
from .core.introspection import fetch_introspection_json, load_introspection_file, schema_from_introspection
from .core.ir import OPERATION_TYPES, IRSchema
from .core.query_builder import QueryBuilder
from .core.sdl import to_definition_language
from .core.validator import Validator

logger = logging.getLogger("gql_qla")


def setup_logging(verbose: bool) -> None:
    """Route library logging through a Rich handler on stderr."""
    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False


def load_schema_option(ctx: click.Context, schema: Optional[str]) -> IRSchema:
    """Load the --schema file, falling back to the configured schema_file."""
    cfg: config_mod.Config = ctx.obj["config"]
    path = schema or cfg.schema_file
    if not path:
        raise click.UsageError("No schema given: pass --schema or set schema_file in the config.")
    try:
        return load_introspection_file(Path(path).expanduser())
    except (OSError, IntrospectionError) as e:
        raise click.ClickException(f"Cannot load schema {path}: {e}") from e


@click.group()
@click.version_option(package_name="gql-qla")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config file (default: ~/.gql-qla/config.yaml).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Schema-aware GraphQL tooling.

    Format GraphQL and JSON, generate operations from an introspected
    schema, and validate queries and variables against it.
    """
    setup_logging(verbose)
    try:
        cfg = config_mod.load(config_path)
    except QlaError as e:
        raise click.ClickException(e.message) from e
    ctx.obj = {"config": cfg}


@main.command("format")
@click.argument("source", type=click.File("r"), default="-")
@click.option("--json", "as_json", is_flag=True, help="Format the input as JSON instead of GraphQL.")
def format_cmd(source, as_json: bool):
    """Pretty-print GraphQL (or JSON) from a file or stdin.

    Examples:

        gql-qla format query.graphql

        echo '{"id":"1"}' | gql-qla format --json
    """
    text = source.read()
    if as_json:
        try:
            click.echo(format_json(text))
        except JSONSyntaxError as e:
            raise click.ClickException(f"Invalid JSON: {e.message}") from e
    else:
        click.echo(format_graphql(text))


@main.command()
@click.argument("source", type=click.File("r"), default="-")
def check(source):
    """Check that braces, parentheses and strings are balanced."""
    error = validate_balance(source.read())
    if error:
        raise click.ClickException(error.message)
    click.echo("OK")


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    help="Introspection JSON file.",
)
@click.pass_context
def sdl(ctx: click.Context, schema: Optional[str]):
    """Print the schema in definition language."""
    ir = load_schema_option(ctx, schema)
    click.echo(to_definition_language(ir), nl=False)


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    help="Introspection JSON file.",
)
@click.option("--field", "-f", "field_name", required=True, help="Root field to generate an operation for.")
@click.option(
    "--operation",
    "-o",
    "operation_type",
    type=click.Choice(OPERATION_TYPES),
    default="query",
    show_default=True,
    help="Root operation type owning the field.",
)
@click.option(
    "--variables-out",
    type=click.Path(dir_okay=False),
    help="Write the example variables to this file instead of stdout.",
)
@click.pass_context
def generate(
    ctx: click.Context,
    schema: Optional[str],
    field_name: str,
    operation_type: str,
    variables_out: Optional[str],
):
    """Generate a complete operation for a root field.

    Examples:

        gql-qla generate -s schema.json -f user

        gql-qla generate -s schema.json -f createUser -o mutation --variables-out vars.json
    """
    cfg: config_mod.Config = ctx.obj["config"]
    ir = load_schema_option(ctx, schema)

    found = ir.root_field(operation_type, field_name)
    if found is None:
        raise click.ClickException(f"No {operation_type} field named '{field_name}' in schema.")
    root_type, field = found

    builder = QueryBuilder(ir, max_depth=cfg.max_depth)
    result = builder.build(operation_type, root_type.name, field)

    click.echo(result.query)
    if result.variables:
        if variables_out:
            Path(variables_out).write_text(result.variables + "\n")
            logger.info("Wrote variables to %s", variables_out)
        else:
            click.echo()
            click.echo(result.variables)


@main.command()
@click.option(
    "--schema",
    "-s",
    type=click.Path(exists=True, dir_okay=False),
    help="Introspection JSON file (omit for a syntax-only check).",
)
@click.option(
    "--query",
    "-q",
    "query_file",
    required=True,
    type=click.File("r"),
    help="File holding the GraphQL operation.",
)
@click.option(
    "--variables",
    "variables_file",
    type=click.File("r"),
    help="File holding the variables JSON object.",
)
@click.pass_context
def validate(ctx: click.Context, schema: Optional[str], query_file, variables_file):
    """Validate a query and its variables against the schema."""
    cfg: config_mod.Config = ctx.obj["config"]
    validator = Validator()

    schema_ast = None
    if schema or cfg.schema_file:
        schema_ast = validator.load_schema(load_schema_option(ctx, schema))
        if schema_ast is None:
            logger.warning("Schema could not be loaded, checking syntax only")

    query = query_file.read()
    error = validator.validate_query(query, schema_ast)
    if error is None and variables_file is not None:
        error = validator.validate_variables(variables_file.read(), query, schema_ast)
    if error:
        raise click.ClickException(error.message)
    click.echo("OK")


@main.command()
@click.argument("url", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write the introspection JSON here (default: stdout).",
)
@click.option(
    "--header",
    "-H",
    "headers",
    multiple=True,
    help="Extra request header as 'Key: Value'; may be repeated.",
)
@click.pass_context
def introspect(ctx: click.Context, url: Optional[str], output: Optional[str], headers: tuple[str, ...]):
    """Fetch the introspection result of an endpoint.

    Without URL the active environment's endpoint is used. Configured
    headers are sent, overridden by any --header given here.
    """
    cfg: config_mod.Config = ctx.obj["config"]
    env = cfg.active_environment()
    url = url or (env.endpoint if env else None)
    if not url:
        raise click.UsageError("No URL given and no active environment endpoint configured.")

    request_headers = cfg.merged_headers()
    for header in headers:
        key, sep, value = header.partition(":")
        if not sep:
            raise click.BadParameter(f"Expected 'Key: Value', got '{header}'", param_hint="--header")
        request_headers[key.strip()] = value.strip()

    try:
        data = fetch_introspection_json(url, request_headers, timeout=cfg.timeout)
        schema = schema_from_introspection(data)
    except IntrospectionError as e:
        raise click.ClickException(e.message) from e

    text = json.dumps(data, indent=2)
    if output:
        Path(output).write_text(text + "\n")
        logger.info("Wrote %d type(s) to %s", len(schema.types), output)
    else:
        click.echo(text)


if __name__ == "__main__":
    main()
