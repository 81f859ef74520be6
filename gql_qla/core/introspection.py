"""Introspection: the query, decoding its result, and fetching it over HTTP.

Decoding accepts a full response (``{"data": {"__schema": ...}}``), the
data object (``{"__schema": ...}``) or the bare schema object. Built-in
introspection types (names starting with ``__``) are dropped before the
``IRSchema`` is built.
"""

import json
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from .errors import IntrospectionError
from .ir import IRSchema

logger = logging.getLogger(__name__)

# Standard introspection query; the TypeRef fragment follows seven levels
# of NON_NULL/LIST wrapping
INTROSPECTION_QUERY = """
query IntrospectionQuery {
  __schema {
    queryType { name }
    mutationType { name }
    subscriptionType { name }
    types {
      ...FullType
    }
  }
}

fragment FullType on __Type {
  kind
  name
  description
  fields(includeDeprecated: true) {
    name
    description
    args {
      ...InputValue
    }
    type {
      ...TypeRef
    }
    isDeprecated
    deprecationReason
  }
  inputFields {
    ...InputValue
  }
  interfaces {
    ...TypeRef
  }
  enumValues(includeDeprecated: true) {
    name
    description
    isDeprecated
    deprecationReason
  }
  possibleTypes {
    ...TypeRef
  }
}

fragment InputValue on __InputValue {
  name
  description
  type { ...TypeRef }
  defaultValue
}

fragment TypeRef on __Type {
  kind
  name
  ofType {
    kind
    name
    ofType {
      kind
      name
      ofType {
        kind
        name
        ofType {
          kind
          name
          ofType {
            kind
            name
            ofType {
              kind
              name
            }
          }
        }
      }
    }
  }
}
"""


def unwrap_schema_json(data: dict[str, Any]) -> dict[str, Any]:
    """Return the ``__schema`` object from any of the accepted shapes."""
    if "data" in data and isinstance(data["data"], dict):
        data = data["data"]
    if "__schema" in data:
        data = data["__schema"]
    return data


def schema_from_introspection(data: dict[str, Any]) -> IRSchema:
    """Build an ``IRSchema`` from decoded introspection JSON.

    Raises:
        IntrospectionError: If the data does not have the introspection shape
    """
    if not isinstance(data, dict):
        raise IntrospectionError("Introspection result must be a JSON object")
    schema_json = unwrap_schema_json(data)
    types = [
        t for t in schema_json.get("types") or []
        if not (isinstance(t, dict) and str(t.get("name", "")).startswith("__"))
    ]
    try:
        schema = IRSchema.model_validate({**schema_json, "types": types})
    except PydanticValidationError as e:
        raise IntrospectionError(f"Invalid introspection result: {e}") from e
    logger.debug("Loaded schema with %d type(s)", len(schema.types))
    return schema


def load_introspection_file(path: str | Path) -> IRSchema:
    """Read an introspection JSON file into an ``IRSchema``."""
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise IntrospectionError(f"Invalid JSON in {path}: {e}") from e
    return schema_from_introspection(data)


def fetch_introspection_json(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> dict[str, Any]:
    """POST the introspection query and return the ``data`` object.

    Args:
        url: GraphQL endpoint URL
        headers: Extra request headers (auth etc.)
        timeout: Request timeout in seconds
        transport: Optional httpx transport, mainly for tests

    Raises:
        IntrospectionError: On transport errors, non-2xx status or GraphQL errors
    """
    request_headers = {"Content-Type": "application/json"}
    request_headers.update(headers or {})

    logger.debug("Fetching introspection from %s", url)
    try:
        with httpx.Client(timeout=timeout, headers=request_headers, transport=transport) as client:
            response = client.post(url, json={"query": INTROSPECTION_QUERY})
    except httpx.HTTPError as e:
        raise IntrospectionError(f"introspection request: {e}") from e

    if not response.is_success:
        raise IntrospectionError(
            f"introspection failed with status {response.status_code}"
        )

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        raise IntrospectionError(f"introspection response is not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise IntrospectionError("introspection response is not a JSON object")
    if payload.get("errors"):
        messages = "; ".join(e.get("message", str(e)) for e in payload["errors"])
        raise IntrospectionError(f"introspection errors: {messages}")

    data = payload.get("data")
    if not isinstance(data, dict):
        raise IntrospectionError("introspection response has no data")
    return data


def fetch_introspection(
    url: str,
    headers: dict[str, str] | None = None,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> IRSchema:
    """Fetch and decode a schema from a live endpoint."""
    return schema_from_introspection(
        fetch_introspection_json(url, headers, timeout, transport)
    )
