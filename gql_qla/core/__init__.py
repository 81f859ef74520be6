"""Core modules of the schema-aware GraphQL tooling engine."""

from .backend import (
    GraphQLCoreBackend,
    ParsedOperation,
    QueryBackend,
    VariableDefinition,
)
from .errors import (
    BackendError,
    BalanceError,
    ConfigError,
    IntrospectionError,
    JSONSyntaxError,
    QlaError,
    ValidationError,
)
from .formatter import (
    Token,
    TokenKind,
    decode_json,
    format_graphql,
    format_json,
    tokenize,
    validate_balance,
    validate_json,
)
from .introspection import (
    INTROSPECTION_QUERY,
    fetch_introspection,
    load_introspection_file,
    schema_from_introspection,
)
from .ir import (
    IREnumValue,
    IRField,
    IRFullType,
    IRInputValue,
    IRSchema,
    IRTypeRef,
)
from .query_builder import GeneratedOperation, QueryBuilder, generate_operation
from .scalars import ScalarHandler, ScalarRegistry
from .sdl import to_definition_language
from .validator import (
    SchemaAST,
    Validator,
    load_schema,
    simplify_error,
    validate_query,
    validate_variables,
)

__all__ = [
    # Errors
    "QlaError",
    "JSONSyntaxError",
    "BalanceError",
    "ValidationError",
    "BackendError",
    "IntrospectionError",
    "ConfigError",
    # Formatter
    "Token",
    "TokenKind",
    "tokenize",
    "format_graphql",
    "decode_json",
    "validate_balance",
    "format_json",
    "validate_json",
    # IR types
    "IRTypeRef",
    "IRInputValue",
    "IRField",
    "IREnumValue",
    "IRFullType",
    "IRSchema",
    # Introspection
    "INTROSPECTION_QUERY",
    "schema_from_introspection",
    "load_introspection_file",
    "fetch_introspection",
    # Scalars
    "ScalarHandler",
    "ScalarRegistry",
    # Query Builder
    "GeneratedOperation",
    "QueryBuilder",
    "generate_operation",
    # SDL
    "to_definition_language",
    # Validation
    "QueryBackend",
    "GraphQLCoreBackend",
    "ParsedOperation",
    "VariableDefinition",
    "SchemaAST",
    "Validator",
    "load_schema",
    "validate_query",
    "validate_variables",
    "simplify_error",
]
