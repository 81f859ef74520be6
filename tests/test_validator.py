"""Unit tests for query and variables validation."""

import pytest

from gql_qla.core.backend import (
    GraphQLCoreBackend,
    ParsedOperation,
    QueryBackend,
    VariableDefinition,
)
from gql_qla.core.errors import BackendError, ValidationError
from gql_qla.core.ir import IRFullType, IRSchema
from gql_qla.core.validator import (
    SchemaAST,
    Validator,
    load_schema,
    simplify_error,
    validate_query,
    validate_variables,
)

from conftest import named, non_null

USER_QUERY = "query User($id: ID!) { user(id: $id) { name } }"
POSTS_QUERY = (
    "query Posts($first: Int, $minScore: Float, $published: Boolean, $tags: [String!]) "
    "{ posts(first: $first, minScore: $minScore, published: $published, tags: $tags) { id } }"
)
USERS_QUERY = "query Users($role: Role) { users(role: $role) { id } }"
CREATE_USER = "mutation Create($input: CreateUserInput!) { createUser(input: $input) { id } }"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def validator():
    return Validator()


@pytest.fixture
def schema_ast(validator, user_schema):
    loaded = validator.load_schema(user_schema)
    assert loaded is not None
    return loaded


class FakeBackend:
    """Backend double that replays canned results."""

    def __init__(self, operations=None, error=None):
        self.operations = operations or []
        self.error = error
        self.calls = []

    def load_schema(self, sdl):
        self.calls.append(("load_schema", sdl))
        return "loaded-schema"

    def load_query(self, schema, query):
        self.calls.append(("load_query", schema, query))
        if self.error:
            raise BackendError(self.error)
        return self.operations

    def parse_query(self, query):
        self.calls.append(("parse_query", query))
        if self.error:
            raise BackendError(self.error)
        return self.operations


# =============================================================================
# simplify_error
# =============================================================================


class TestSimplifyError:
    """Tests for simplify_error."""

    def test_strips_location(self):
        assert simplify_error("1:5: Cannot query field 'x'") == "Cannot query field 'x'"

    def test_strips_two_part_location(self):
        assert simplify_error("input:1: 5: Unexpected Name") == "Unexpected Name"

    def test_keeps_non_numeric_second_tag(self):
        assert simplify_error("1:27: Syntax Error: Expected Name") == "Syntax Error: Expected Name"

    def test_first_line_only(self):
        assert simplify_error("1:1: first\n2:1: second") == "first"

    def test_no_prefix(self):
        assert simplify_error("plain message") == "plain message"


# =============================================================================
# Schema loading
# =============================================================================


class TestLoadSchema:
    """Tests for Validator.load_schema."""

    def test_none(self, validator):
        assert validator.load_schema(None) is None

    def test_loads_user_schema(self, validator, user_schema):
        loaded = validator.load_schema(user_schema)
        assert isinstance(loaded, SchemaAST)
        assert loaded.source is user_schema

    def test_rejected_schema_returns_none(self, validator):
        # Query type with no fields cannot be built
        schema = IRSchema(
            query_type=named("Query", "OBJECT"),
            types=[IRFullType(kind="OBJECT", name="Query")],
        )
        assert validator.load_schema(schema) is None

    def test_backend_receives_sdl(self, user_schema):
        backend = FakeBackend()
        loaded = Validator(backend=backend).load_schema(user_schema)
        assert loaded.schema == "loaded-schema"
        assert backend.calls[0][1].startswith("schema {")


# =============================================================================
# Query validation
# =============================================================================


class TestValidateQuery:
    """Tests for Validator.validate_query."""

    def test_valid(self, validator, schema_ast):
        assert validator.validate_query(USER_QUERY, schema_ast) is None

    def test_empty(self, validator, schema_ast):
        assert validator.validate_query("   ", schema_ast) is None

    def test_unknown_field(self, validator, schema_ast):
        error = validator.validate_query('{ user(id: "1") { nope } }', schema_ast)
        assert isinstance(error, ValidationError)
        assert "Cannot query field 'nope'" in error.message
        assert not error.message[0].isdigit()

    def test_missing_argument(self, validator, schema_ast):
        error = validator.validate_query("{ user { name } }", schema_ast)
        assert error is not None
        assert "id" in error.message
        assert "required" in error.message

    def test_syntax_error(self, validator, schema_ast):
        error = validator.validate_query('{ user(id: "1") { name }', schema_ast)
        assert error.message.startswith("Syntax Error")

    def test_without_schema_checks_syntax_only(self, validator):
        assert validator.validate_query("{ anything { goes } }") is None
        assert validator.validate_query("{ broken") is not None

    def test_backend_error_simplified(self, schema_ast):
        backend = FakeBackend(error="input:3: 14: Unknown thing\nmore detail")
        error = Validator(backend=backend).validate_query("{ a }", schema_ast)
        assert error.message == "Unknown thing"


# =============================================================================
# Variables validation
# =============================================================================


class TestValidateVariables:
    """Tests for Validator.validate_variables."""

    def test_valid(self, validator, schema_ast):
        assert validator.validate_variables('{"id": "1"}', USER_QUERY, schema_ast) is None

    def test_empty(self, validator, schema_ast):
        assert validator.validate_variables("  ", USER_QUERY, schema_ast) is None

    def test_invalid_json(self, validator, schema_ast):
        assert validator.validate_variables("{bad", USER_QUERY, schema_ast).message == "invalid JSON"

    def test_nan_is_invalid_json(self, validator, schema_ast):
        error = validator.validate_variables('{"minScore": NaN}', POSTS_QUERY, schema_ast)
        assert error.message == "invalid JSON"

    def test_non_object_json(self, validator, schema_ast):
        assert validator.validate_variables("[1]", USER_QUERY, schema_ast).message == "invalid JSON"

    def test_invalid_json_without_schema(self, validator):
        assert validator.validate_variables("{bad", USER_QUERY).message == "invalid JSON"

    def test_without_schema_only_syntax(self, validator):
        assert validator.validate_variables('{"whatever": 1}', USER_QUERY) is None

    def test_missing_required(self, validator, schema_ast):
        error = validator.validate_variables("{}", USER_QUERY, schema_ast)
        assert error.message == "missing required variable $id (ID!)"

    def test_default_makes_optional(self, validator, schema_ast):
        query = 'query User($id: ID! = "1") { user(id: $id) { name } }'
        assert validator.validate_variables("{}", query, schema_ast) is None

    def test_unknown_variable(self, validator, schema_ast):
        error = validator.validate_variables('{"id": "1", "extra": true}', USER_QUERY, schema_ast)
        assert error.message == "unknown variable $extra"

    def test_string_type_mismatch(self, validator, schema_ast):
        error = validator.validate_variables('{"id": 5}', USER_QUERY, schema_ast)
        assert error.message == "$id: expected string for ID"

    def test_null_for_non_null(self, validator, schema_ast):
        error = validator.validate_variables('{"id": null}', USER_QUERY, schema_ast)
        assert error.message == "$id: expected ID!, got null"

    def test_null_for_nullable(self, validator, schema_ast):
        assert validator.validate_variables('{"first": null}', POSTS_QUERY, schema_ast) is None

    @pytest.mark.parametrize(
        "variables, expected",
        [
            ('{"first": 5}', None),
            ('{"first": 5.0}', None),
            ('{"first": 5.5}', "$first: expected integer for Int"),
            ('{"first": true}', "$first: expected number for Int"),
            ('{"first": "5"}', "$first: expected number for Int"),
            ('{"minScore": 1}', None),
            ('{"minScore": "high"}', "$minScore: expected number for Float"),
            ('{"published": "yes"}', "$published: expected boolean for Boolean"),
        ],
    )
    def test_scalars(self, validator, schema_ast, variables, expected):
        error = validator.validate_variables(variables, POSTS_QUERY, schema_ast)
        assert (error.message if error else None) == expected

    @pytest.mark.parametrize(
        "variables, expected",
        [
            ('{"tags": ["a", "b"]}', None),
            ('{"tags": []}', None),
            ('{"tags": "a"}', "$tags: expected list for [String!]"),
            ('{"tags": ["a", null]}', "$tags: [1]: expected String!, got null"),
            ('{"tags": ["a", 3]}', "$tags: [1]: expected string for String"),
        ],
    )
    def test_lists(self, validator, schema_ast, variables, expected):
        error = validator.validate_variables(variables, POSTS_QUERY, schema_ast)
        assert (error.message if error else None) == expected

    @pytest.mark.parametrize(
        "variables, expected",
        [
            ('{"role": "ADMIN"}', None),
            ('{"role": "ROOT"}', '$role: invalid enum value "ROOT" for Role'),
            ('{"role": 1}', "$role: expected enum value (string) for Role"),
        ],
    )
    def test_enums(self, validator, schema_ast, variables, expected):
        error = validator.validate_variables(variables, USERS_QUERY, schema_ast)
        assert (error.message if error else None) == expected

    @pytest.mark.parametrize(
        "variables, expected",
        [
            ('{"input": {"name": "Ada"}}', None),
            ('{"input": {"name": "Ada", "profile": {"age": 36, "active": true}}}', None),
            ('{"input": {}}', '$input: missing required field "name"'),
            ('{"input": {"name": "Ada", "nope": 1}}', '$input: unknown field "nope" on CreateUserInput'),
            ('{"input": {"name": "Ada", "profile": {"age": 1.5}}}', "$input: profile: age: expected integer for Int"),
            ('{"input": {"name": "Ada", "role": "ROOT"}}', '$input: role: invalid enum value "ROOT" for Role'),
            ('{"input": {"name": "Ada", "tags": [1]}}', "$input: tags: [0]: expected string for String"),
            ('{"input": "Ada"}', "$input: expected object for CreateUserInput"),
            ('{"input": null}', "$input: expected CreateUserInput!, got null"),
        ],
    )
    def test_input_objects(self, validator, schema_ast, variables, expected):
        error = validator.validate_variables(variables, CREATE_USER, schema_ast)
        assert (error.message if error else None) == expected

    def test_custom_scalar_accepts_anything(self, validator, schema_ast):
        variables = '{"input": {"name": "Ada", "profile": {"createdAt": 1700000000}}}'
        assert validator.validate_variables(variables, CREATE_USER, schema_ast) is None

    def test_invalid_query_skips_checks(self, validator, schema_ast):
        assert validator.validate_variables('{"x": 1}', "{ nope }", schema_ast) is None

    def test_uses_first_operation(self, schema_ast):
        backend = FakeBackend(
            operations=[
                ParsedOperation("query", "A", [VariableDefinition("id", non_null(named("ID")))]),
                ParsedOperation("query", "B", []),
            ]
        )
        error = Validator(backend=backend).validate_variables("{}", "query A { a }", schema_ast)
        assert error.message == "missing required variable $id (ID!)"


# =============================================================================
# Backend
# =============================================================================


class TestGraphQLCoreBackend:
    """Tests for the graphql-core backend."""

    def test_is_query_backend(self):
        assert isinstance(GraphQLCoreBackend(), QueryBackend)
        assert isinstance(FakeBackend(), QueryBackend)

    def test_parse_query_variables(self):
        operations = GraphQLCoreBackend().parse_query(
            'query Q($id: ID!, $tags: [String!] = ["a"]) { a } mutation M { b }'
        )
        assert [(op.operation, op.name) for op in operations] == [("query", "Q"), ("mutation", "M")]
        first = operations[0].variables
        assert first[0].type_text == "ID!"
        assert first[0].required
        assert first[1].type_text == "[String!]"
        assert first[1].has_default
        assert not first[1].required

    def test_parse_error_has_location(self):
        with pytest.raises(BackendError) as exc_info:
            GraphQLCoreBackend().parse_query("{ a")
        assert exc_info.value.message.startswith("1:4: Syntax Error")

    def test_load_schema_rejects_bad_sdl(self):
        with pytest.raises(BackendError):
            GraphQLCoreBackend().load_schema("type Query { a: Missing }")


# =============================================================================
# Module-level helpers
# =============================================================================


class TestModuleHelpers:
    """Tests for the default-validator shortcuts."""

    def test_round_trip(self, user_schema):
        schema_ast = load_schema(user_schema)
        assert validate_query(USER_QUERY, schema_ast) is None
        assert validate_variables('{"id": "1"}', USER_QUERY, schema_ast) is None
        assert validate_variables("{}", USER_QUERY, schema_ast).message == (
            "missing required variable $id (ID!)"
        )
