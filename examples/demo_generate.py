#!/usr/bin/env python3
"""Demonstration of operation generation and validation.

This script shows how to:
1. Decode an introspection result into a schema
2. Generate an operation and example variables for every root field
3. Project the schema to SDL and validate the generated operations

Note: This demo doesn't make real API calls - it works on an inline
introspection result.
"""

from gql_qla.core import (
    QueryBuilder,
    Validator,
    schema_from_introspection,
    to_definition_language,
)


def ref(name, kind="SCALAR"):
    return {"kind": kind, "name": name, "ofType": None}


def non_null(inner):
    return {"kind": "NON_NULL", "name": None, "ofType": inner}


def list_of(inner):
    return {"kind": "LIST", "name": None, "ofType": inner}


def field(name, type_, args=()):
    return {"name": name, "type": type_, "args": list(args)}


def arg(name, type_):
    return {"name": name, "type": type_, "defaultValue": None}


INTROSPECTION = {
    "data": {
        "__schema": {
            "queryType": {"name": "Query"},
            "mutationType": {"name": "Mutation"},
            "subscriptionType": None,
            "types": [
                {
                    "kind": "OBJECT",
                    "name": "Query",
                    "fields": [
                        field("book", ref("Book", "OBJECT"), [arg("id", non_null(ref("ID")))]),
                        field("books", non_null(list_of(non_null(ref("Book", "OBJECT")))),
                              [arg("genre", ref("Genre", "ENUM"))]),
                    ],
                },
                {
                    "kind": "OBJECT",
                    "name": "Mutation",
                    "fields": [
                        field("addBook", ref("Book", "OBJECT"),
                              [arg("input", non_null(ref("BookInput", "INPUT_OBJECT")))]),
                    ],
                },
                {
                    "kind": "OBJECT",
                    "name": "Book",
                    "fields": [
                        field("id", non_null(ref("ID"))),
                        field("title", non_null(ref("String"))),
                        field("genre", ref("Genre", "ENUM")),
                        field("author", ref("Author", "OBJECT")),
                    ],
                },
                {
                    "kind": "OBJECT",
                    "name": "Author",
                    "fields": [
                        field("name", ref("String")),
                        field("books", list_of(ref("Book", "OBJECT"))),
                    ],
                },
                {
                    "kind": "ENUM",
                    "name": "Genre",
                    "enumValues": [{"name": "FICTION"}, {"name": "HISTORY"}],
                },
                {
                    "kind": "INPUT_OBJECT",
                    "name": "BookInput",
                    "inputFields": [
                        arg("title", non_null(ref("String"))),
                        arg("genre", ref("Genre", "ENUM")),
                        arg("pages", ref("Int")),
                    ],
                },
                {"kind": "SCALAR", "name": "ID"},
                {"kind": "SCALAR", "name": "String"},
                {"kind": "SCALAR", "name": "Int"},
                {"kind": "SCALAR", "name": "Boolean"},
            ],
        }
    }
}


def main():
    print("=== Operation Generation Demo ===\n")

    print("1. Decoding introspection result...")
    schema = schema_from_introspection(INTROSPECTION)
    print(f"   {len(schema.types)} types, roots: {[t.name for t in schema.root_types()]}")

    print("\n2. Schema definition language:\n")
    sdl = to_definition_language(schema)
    print(sdl)

    validator = Validator()
    schema_ast = validator.load_schema(schema)

    print("3. Generated operations:")
    builder = QueryBuilder(schema)
    for operation_type in ("query", "mutation"):
        root = schema.root_type_for(operation_type)
        for f in root.fields:
            result = builder.build(operation_type, root.name, f)
            print(f"\n   --- {operation_type} {f.name} ---")
            print(result.query)
            if result.variables:
                print(result.variables)

            error = validator.validate_query(result.query, schema_ast)
            if error is None and result.variables:
                error = validator.validate_variables(result.variables, result.query, schema_ast)
            print(f"   valid: {error is None}" + (f" ({error.message})" if error else ""))

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
