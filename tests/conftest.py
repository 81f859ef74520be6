"""Shared schema fixtures.

The main fixture models a small user service:

    type Query {
      user(id: ID!): User
      users(role: Role): [User!]!
      posts(first: Int, minScore: Float, published: Boolean, tags: [String!]): [Post!]!
      search(text: String!): [SearchResult!]!
      node(id: ID!): Node
    }
    type Mutation { createUser(input: CreateUserInput!): User }
    interface Node { id: ID! }
    type User implements Node { id: ID! name: String! email: String role: Role! posts: [Post!]! }
    type Post { id: ID! title: String! author: User }
    union SearchResult = User | Post
    enum Role { ADMIN USER }
    input CreateUserInput { name: String! email: String role: Role tags: [String!] profile: ProfileInput }
    input ProfileInput { bio: String age: Int score: Float active: Boolean = true createdAt: DateTime }
    scalar DateTime
"""

import pytest

from gql_qla.core.ir import (
    IREnumValue,
    IRField,
    IRFullType,
    IRInputValue,
    IRSchema,
    IRTypeRef,
)


# =============================================================================
# Builders
# =============================================================================


def named(name, kind="SCALAR"):
    return IRTypeRef.named(name, kind)


def non_null(inner):
    return IRTypeRef.non_null(inner)


def list_of(inner):
    return IRTypeRef.list_of(inner)


def arg(name, type_, default=None):
    return IRInputValue(name=name, type=type_, default_value=default)


def field(name, type_, *args):
    return IRField(name=name, type=type_, args=list(args))


def object_type(name, *fields, interfaces=()):
    return IRFullType(
        kind="OBJECT",
        name=name,
        fields=list(fields),
        interfaces=[named(i, "INTERFACE") for i in interfaces],
    )


def scalar(name):
    return IRFullType(kind="SCALAR", name=name)


def builtin_scalars():
    return [scalar(n) for n in ("ID", "String", "Int", "Float", "Boolean")]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def minimal_schema():
    """Query.user(id: ID!): User with User { id name }."""
    return IRSchema(
        query_type=named("Query", "OBJECT"),
        types=[
            object_type(
                "Query",
                field("user", named("User", "OBJECT"), arg("id", non_null(named("ID")))),
            ),
            object_type(
                "User",
                field("id", non_null(named("ID"))),
                field("name", named("String")),
            ),
            *builtin_scalars(),
        ],
    )


@pytest.fixture
def user_schema():
    """The user service schema described in the module docstring."""
    user = named("User", "OBJECT")
    post = named("Post", "OBJECT")
    role = named("Role", "ENUM")
    return IRSchema(
        query_type=named("Query", "OBJECT"),
        mutation_type=named("Mutation", "OBJECT"),
        types=[
            object_type(
                "Query",
                field("user", user, arg("id", non_null(named("ID")))),
                field("users", non_null(list_of(non_null(user))), arg("role", role)),
                field(
                    "posts",
                    non_null(list_of(non_null(post))),
                    arg("first", named("Int")),
                    arg("minScore", named("Float")),
                    arg("published", named("Boolean")),
                    arg("tags", list_of(non_null(named("String")))),
                ),
                field(
                    "search",
                    non_null(list_of(non_null(named("SearchResult", "UNION")))),
                    arg("text", non_null(named("String"))),
                ),
                field("node", named("Node", "INTERFACE"), arg("id", non_null(named("ID")))),
            ),
            object_type(
                "Mutation",
                field(
                    "createUser",
                    user,
                    arg("input", non_null(named("CreateUserInput", "INPUT_OBJECT"))),
                ),
            ),
            IRFullType(
                kind="INTERFACE",
                name="Node",
                fields=[field("id", non_null(named("ID")))],
                possible_types=[user],
            ),
            object_type(
                "User",
                field("id", non_null(named("ID"))),
                field("name", non_null(named("String"))),
                field("email", named("String")),
                field("role", non_null(role)),
                field("posts", non_null(list_of(non_null(post)))),
                interfaces=["Node"],
            ),
            object_type(
                "Post",
                field("id", non_null(named("ID"))),
                field("title", non_null(named("String"))),
                field("author", user),
            ),
            IRFullType(kind="UNION", name="SearchResult", possible_types=[user, post]),
            IRFullType(
                kind="ENUM",
                name="Role",
                enum_values=[IREnumValue(name="ADMIN"), IREnumValue(name="USER")],
            ),
            IRFullType(
                kind="INPUT_OBJECT",
                name="CreateUserInput",
                input_fields=[
                    arg("name", non_null(named("String"))),
                    arg("email", named("String")),
                    arg("role", role),
                    arg("tags", list_of(non_null(named("String")))),
                    arg("profile", named("ProfileInput", "INPUT_OBJECT")),
                ],
            ),
            IRFullType(
                kind="INPUT_OBJECT",
                name="ProfileInput",
                input_fields=[
                    arg("bio", named("String")),
                    arg("age", named("Int")),
                    arg("score", named("Float")),
                    arg("active", named("Boolean"), default="true"),
                    arg("createdAt", named("DateTime")),
                ],
            ),
            scalar("DateTime"),
            *builtin_scalars(),
        ],
    )


@pytest.fixture
def cyclic_schema():
    """A -> B -> C -> A, each with an id, reachable from Query.a."""
    return IRSchema(
        query_type=named("Query", "OBJECT"),
        types=[
            object_type("Query", field("a", named("A", "OBJECT"))),
            object_type("A", field("id", named("ID")), field("b", named("B", "OBJECT"))),
            object_type("B", field("id", named("ID")), field("c", named("C", "OBJECT"))),
            object_type("C", field("id", named("ID")), field("a", named("A", "OBJECT"))),
            *builtin_scalars(),
        ],
    )


@pytest.fixture
def introspection_data():
    """A raw introspection response, as a server returns it."""
    return {
        "data": {
            "__schema": {
                "queryType": {"name": "Query"},
                "mutationType": None,
                "subscriptionType": None,
                "types": [
                    {
                        "kind": "OBJECT",
                        "name": "Query",
                        "description": None,
                        "fields": [
                            {
                                "name": "books",
                                "description": "All books",
                                "args": [
                                    {
                                        "name": "first",
                                        "description": None,
                                        "type": {"kind": "SCALAR", "name": "Int", "ofType": None},
                                        "defaultValue": "10",
                                    }
                                ],
                                "type": {
                                    "kind": "NON_NULL",
                                    "name": None,
                                    "ofType": {
                                        "kind": "LIST",
                                        "name": None,
                                        "ofType": {
                                            "kind": "NON_NULL",
                                            "name": None,
                                            "ofType": {"kind": "OBJECT", "name": "Book", "ofType": None},
                                        },
                                    },
                                },
                                "isDeprecated": False,
                                "deprecationReason": None,
                            }
                        ],
                        "inputFields": None,
                        "interfaces": [],
                        "enumValues": None,
                        "possibleTypes": None,
                    },
                    {
                        "kind": "OBJECT",
                        "name": "Book",
                        "description": None,
                        "fields": [
                            {
                                "name": "title",
                                "description": None,
                                "args": [],
                                "type": {"kind": "SCALAR", "name": "String", "ofType": None},
                                "isDeprecated": True,
                                "deprecationReason": "Use name",
                            }
                        ],
                        "inputFields": None,
                        "interfaces": [],
                        "enumValues": None,
                        "possibleTypes": None,
                    },
                    {"kind": "SCALAR", "name": "String", "description": None},
                    {"kind": "SCALAR", "name": "Int", "description": None},
                    {"kind": "SCALAR", "name": "Boolean", "description": None},
                    {
                        "kind": "OBJECT",
                        "name": "__Schema",
                        "description": None,
                        "fields": [],
                    },
                    {
                        "kind": "ENUM",
                        "name": "__TypeKind",
                        "description": None,
                        "enumValues": [{"name": "SCALAR", "isDeprecated": False}],
                    },
                ],
            }
        }
    }
