"""Query backends: the parser/validator the validator delegates to.

A backend loads SDL into a schema object, parses queries (with or without
a schema) and reports the variable definitions of each operation. Any
object implementing ``QueryBackend`` can be plugged into the
``Validator``; ``GraphQLCoreBackend`` is the default, built on graphql-core.

Example:
    class StrictBackend(GraphQLCoreBackend):
        def load_query(self, schema, query):
            operations = super().load_query(schema, query)
            if len(operations) > 1:
                raise BackendError("1:1: one operation per document")
            return operations
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from graphql import (
    DocumentNode,
    GraphQLError,
    ListTypeNode,
    NonNullTypeNode,
    OperationDefinitionNode,
    TypeNode,
    build_schema,
    parse,
    validate,
    validate_schema,
)

from .errors import BackendError
from .ir import IRTypeRef


@dataclass(frozen=True)
class VariableDefinition:
    """A ``$name: Type = default`` declaration of an operation."""
    name: str
    type: IRTypeRef
    has_default: bool = False

    @property
    def type_text(self) -> str:
        return self.type.display_name()

    @property
    def required(self) -> bool:
        """Non-null without a default value."""
        return self.type.kind == "NON_NULL" and not self.has_default


@dataclass(frozen=True)
class ParsedOperation:
    """An operation found in a parsed document."""
    operation: str  # 'query', 'mutation' or 'subscription'
    name: str | None = None
    variables: list[VariableDefinition] = field(default_factory=list)


@runtime_checkable
class QueryBackend(Protocol):
    """Protocol for the external GraphQL parser/validator.

    Every method raises ``BackendError`` on rejection. Messages may span
    several lines and carry a ``line:column: `` location prefix.
    """

    def load_schema(self, sdl: str) -> Any:
        """Load SDL text into a schema object understood by ``load_query``."""
        ...

    def load_query(self, schema: Any, query: str) -> list[ParsedOperation]:
        """Parse and validate a query against a loaded schema."""
        ...

    def parse_query(self, query: str) -> list[ParsedOperation]:
        """Parse a query for syntax only."""
        ...


class GraphQLCoreBackend:
    """``QueryBackend`` implemented with graphql-core."""

    def load_schema(self, sdl: str) -> Any:
        try:
            schema = build_schema(sdl)
        except GraphQLError as e:
            raise BackendError(format_errors([e])) from e
        except TypeError as e:
            # SDL validation failures are raised as TypeError
            raise BackendError(str(e)) from e

        errors = validate_schema(schema)
        if errors:
            raise BackendError(format_errors(errors))
        return schema

    def load_query(self, schema: Any, query: str) -> list[ParsedOperation]:
        document = self._parse(query)
        errors = validate(schema, document)
        if errors:
            raise BackendError(format_errors(errors))
        return operations_of(document)

    def parse_query(self, query: str) -> list[ParsedOperation]:
        return operations_of(self._parse(query))

    @staticmethod
    def _parse(query: str) -> DocumentNode:
        try:
            return parse(query)
        except GraphQLError as e:
            raise BackendError(format_errors([e])) from e


def format_errors(errors: list[GraphQLError]) -> str:
    """Render errors one per line as ``line:column: message``."""
    lines = []
    for error in errors:
        if error.locations:
            location = error.locations[0]
            lines.append(f"{location.line}:{location.column}: {error.message}")
        else:
            lines.append(error.message)
    return "\n".join(lines)


def type_ref_from_node(node: TypeNode) -> IRTypeRef:
    """Convert a graphql-core type node into an ``IRTypeRef``."""
    if isinstance(node, NonNullTypeNode):
        return IRTypeRef.non_null(type_ref_from_node(node.type))
    if isinstance(node, ListTypeNode):
        return IRTypeRef.list_of(type_ref_from_node(node.type))
    return IRTypeRef(name=node.name.value)


def operations_of(document: DocumentNode) -> list[ParsedOperation]:
    """Collect the operations of a document with their variable definitions."""
    operations = []
    for definition in document.definitions:
        if not isinstance(definition, OperationDefinitionNode):
            continue
        variables = [
            VariableDefinition(
                name=v.variable.name.value,
                type=type_ref_from_node(v.type),
                has_default=v.default_value is not None,
            )
            for v in definition.variable_definitions or ()
        ]
        operations.append(
            ParsedOperation(
                operation=definition.operation.value,
                name=definition.name.value if definition.name else None,
                variables=variables,
            )
        )
    return operations
