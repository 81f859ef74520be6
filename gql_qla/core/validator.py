"""Query and variables validation against an introspected schema.

Semantic checks on the query itself (unknown fields, missing arguments,
syntax) are delegated to a ``QueryBackend``. Variables are checked here:
presence of required variables, unknown keys and the JSON type of every
provided value, walking lists and input objects recursively.

Each check reports only the first violation it finds.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from .backend import GraphQLCoreBackend, QueryBackend
from .errors import BackendError, ValidationError
from .formatter import decode_json
from .ir import IRFullType, IRSchema, IRTypeRef
from .scalars import ScalarRegistry, default_registry
from .sdl import to_definition_language

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaAST:
    """A backend-loaded schema together with the IR it was projected from."""
    schema: Any
    source: IRSchema


def simplify_error(message: str) -> str:
    """Reduce a backend error to a single human-readable line.

    ``"1:5: Cannot query field..."`` becomes ``"Cannot query field..."``;
    a second numeric tag (``input:1: 5: msg``) is stripped as well.
    """
    first = message.split("\n", 1)[0]
    _, sep, rest = first.partition(": ")
    if not sep:
        return first
    tag, sep, tail = rest.partition(": ")
    if sep and all(c in "0123456789" for c in tag):
        return tail
    return rest


class Validator:
    """Validates queries and variables, delegating parsing to a backend."""

    def __init__(
        self,
        backend: QueryBackend | None = None,
        scalars: ScalarRegistry | None = None,
    ):
        self.backend = backend or GraphQLCoreBackend()
        self.scalars = scalars or default_registry

    def load_schema(self, schema: IRSchema | None) -> SchemaAST | None:
        """Project the schema to SDL and load it into the backend.

        Returns None for a missing schema or one the backend rejects.
        """
        if schema is None:
            return None
        sdl = to_definition_language(schema)
        try:
            loaded = self.backend.load_schema(sdl)
        except BackendError as e:
            logger.debug("Backend rejected projected schema: %s", e.message)
            return None
        return SchemaAST(schema=loaded, source=schema)

    def validate_query(
        self,
        query: str,
        schema_ast: SchemaAST | None = None,
    ) -> ValidationError | None:
        """Validate a query, or only its syntax when no schema is loaded."""
        query = query.strip()
        if not query:
            return None
        try:
            if schema_ast is None:
                self.backend.parse_query(query)
            else:
                self.backend.load_query(schema_ast.schema, query)
        except BackendError as e:
            return ValidationError(simplify_error(e.message))
        return None

    def validate_variables(
        self,
        variables_json: str,
        query: str,
        schema_ast: SchemaAST | None = None,
    ) -> ValidationError | None:
        """Validate a variables JSON object against the query's declarations.

        Without a schema only the JSON syntax is checked. A query that does
        not itself validate is not checked further.
        """
        variables_json = variables_json.strip()
        if not variables_json:
            return None

        try:
            variables = decode_json(variables_json)
        except ValueError:
            return ValidationError("invalid JSON")
        if not isinstance(variables, dict):
            return ValidationError("invalid JSON")

        if schema_ast is None:
            return None
        query = query.strip()
        if not query:
            return None

        try:
            operations = self.backend.load_query(schema_ast.schema, query)
        except BackendError as e:
            logger.debug("Skipping variable checks, query is invalid: %s", e.message)
            return None
        if not operations:
            return None

        definitions = operations[0].variables

        for definition in definitions:
            if definition.required and definition.name not in variables:
                return ValidationError(
                    f"missing required variable ${definition.name} ({definition.type_text})"
                )

        declared = {d.name for d in definitions}
        for name in variables:
            if name not in declared:
                return ValidationError(f"unknown variable ${name}")

        for definition in definitions:
            if definition.name not in variables:
                continue
            problem = self.check_value(
                variables[definition.name], definition.type, schema_ast.source
            )
            if problem:
                return ValidationError(f"${definition.name}: {problem}")

        return None

    def check_value(self, value: Any, ref: IRTypeRef, schema: IRSchema) -> str | None:
        """Check a decoded JSON value against a type, returning a message or None."""
        if value is None:
            if ref.kind == "NON_NULL":
                return f"expected {ref.display_name()}, got null"
            return None

        inner = ref.of_type if ref.kind == "NON_NULL" else ref
        if inner is None:
            return None

        if inner.kind == "LIST":
            if not isinstance(value, list):
                return f"expected list for {ref.display_name()}"
            if inner.of_type is None:
                return None
            for i, item in enumerate(value):
                problem = self.check_value(item, inner.of_type, schema)
                if problem:
                    return f"[{i}]: {problem}"
            return None

        name = inner.named_type()
        if self.scalars.has(name):
            return self.scalars.check(name, value)

        type_def = schema.type_by_name(name)
        if type_def is None:
            return None

        if type_def.kind == "ENUM":
            if not isinstance(value, str):
                return f"expected enum value (string) for {name}"
            if any(v.name == value for v in type_def.enum_values):
                return None
            return f"invalid enum value {json.dumps(value)} for {name}"

        if type_def.kind == "INPUT_OBJECT":
            if not isinstance(value, dict):
                return f"expected object for {name}"
            return self._check_input_object(value, type_def, schema)

        return None

    def _check_input_object(
        self,
        obj: dict[str, Any],
        type_def: IRFullType,
        schema: IRSchema,
    ) -> str | None:
        for f in type_def.input_fields:
            required = f.type.kind == "NON_NULL" and f.default_value is None
            if required and f.name not in obj:
                return f"missing required field {json.dumps(f.name)}"

        known = {f.name for f in type_def.input_fields}
        for key in obj:
            if key not in known:
                return f"unknown field {json.dumps(key)} on {type_def.name}"

        for f in type_def.input_fields:
            if f.name not in obj:
                continue
            problem = self.check_value(obj[f.name], f.type, schema)
            if problem:
                return f"{f.name}: {problem}"
        return None


default_validator = Validator()


def load_schema(schema: IRSchema | None) -> SchemaAST | None:
    """Load a schema with the default graphql-core backend."""
    return default_validator.load_schema(schema)


def validate_query(query: str, schema_ast: SchemaAST | None = None) -> ValidationError | None:
    """Validate a query with the default graphql-core backend."""
    return default_validator.validate_query(query, schema_ast)


def validate_variables(
    variables_json: str,
    query: str,
    schema_ast: SchemaAST | None = None,
) -> ValidationError | None:
    """Validate variables with the default graphql-core backend."""
    return default_validator.validate_variables(variables_json, query, schema_ast)
