"""Definition-language projector.

Renders an ``IRSchema`` back to schema definition language (SDL) so that
an SDL-consuming parser can load it. Only the shape of the schema is
projected: descriptions, directives and deprecation metadata are dropped.

Templates are rendered with Jinja2 from ``gql_qla/core/templates``.
"""

import logging
from functools import lru_cache

from jinja2 import Environment, PackageLoader, select_autoescape

from .ir import BUILTIN_SCALARS, OPERATION_TYPES, IRField, IRInputValue, IRSchema, IRTypeRef

logger = logging.getLogger(__name__)

# Prefix reserved for introspection types (__Type, __Schema...)
RESERVED_PREFIX = "__"


def input_value(value: IRInputValue) -> str:
    """Render ``name: Type`` with an optional ``= default``."""
    text = f"{value.name}: {value.type.display_name()}"
    if value.default_value is not None:
        text += f" = {value.default_value}"
    return text


def field_definition(field: IRField) -> str:
    """Render ``name(arg: Type, ...): Type``."""
    args = ""
    if field.args:
        args = "(" + ", ".join(input_value(a) for a in field.args) + ")"
    return f"{field.name}{args}: {field.type.display_name()}"


def names(refs: list[IRTypeRef]) -> list[str]:
    """Innermost names of a list of type references."""
    return [ref.named_type() for ref in refs]


@lru_cache(maxsize=1)
def _environment() -> Environment:
    env = Environment(
        loader=PackageLoader("gql_qla.core", "templates"),
        autoescape=select_autoescape(),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["input_value"] = input_value
    env.filters["field_definition"] = field_definition
    env.filters["names"] = names
    return env


def is_projected(name: str, kind: str) -> bool:
    """Check whether a type appears in the projected SDL."""
    if name.startswith(RESERVED_PREFIX):
        return False
    if kind == "SCALAR" and name in BUILTIN_SCALARS:
        return False
    return True


def to_definition_language(schema: IRSchema) -> str:
    """Render the schema as SDL text.

    A ``schema { ... }`` block declares whichever root types are present,
    followed by one definition per user type. Types with no fields, values
    or members are written without a body.
    """
    env = _environment()
    blocks = []

    roots = []
    for operation_type in OPERATION_TYPES:
        ref = schema.root_type_ref(operation_type)
        if ref is not None and ref.name is not None:
            roots.append((operation_type, ref.name))
    if roots:
        blocks.append(env.get_template("schema_definition.graphql.j2").render(roots=roots))

    type_template = env.get_template("type_definition.graphql.j2")
    for t in schema.types:
        if not is_projected(t.name, t.kind):
            continue
        block = type_template.render(type=t).strip()
        if block:
            blocks.append(block)

    sdl = "\n\n".join(block.strip() for block in blocks) + "\n"
    logger.debug("Projected %d definition(s) to SDL", len(blocks))
    return sdl
