"""Query builder for GraphQL operations.

Turns a root field of an introspected schema into a complete, runnable
operation: variable declarations for every argument, a selection set that
expands the return type, and an example variables object.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from .formatter import format_graphql
from .ir import OPERATION_TYPES, IRField, IRSchema, IRTypeRef
from .scalars import ScalarRegistry, default_registry

logger = logging.getLogger(__name__)

# Nested object levels expanded below the root field
DEFAULT_MAX_DEPTH = 5


@dataclass(frozen=True)
class GeneratedOperation:
    """Operation text plus example variables (2-space JSON or "")."""
    query: str
    variables: str = ""

    @property
    def variables_dict(self) -> dict[str, Any]:
        return json.loads(self.variables) if self.variables else {}


class QueryBuilder:
    """Builds GraphQL operation strings from schema fields."""

    def __init__(
        self,
        schema: IRSchema,
        max_depth: int = DEFAULT_MAX_DEPTH,
        scalars: ScalarRegistry | None = None,
    ):
        """Initialize with schema for type lookups.

        Args:
            schema: The introspected schema
            max_depth: Object nesting levels to expand before giving up
            scalars: Registry supplying example values for scalars
        """
        self.schema = schema
        self.max_depth = max_depth
        self.scalars = scalars or default_registry

    def build(
        self,
        operation_type: str,
        root_type_name: str,
        field: IRField,
    ) -> GeneratedOperation:
        """Build a complete operation for a root field.

        Args:
            operation_type: 'query', 'mutation' or 'subscription'
            root_type_name: Name of the root type owning the field
            field: The root field to call

        Returns:
            The formatted operation and its example variables
        """
        if operation_type not in OPERATION_TYPES:
            raise ValueError(f"Unknown operation type: {operation_type}")

        var_decls = []
        arg_refs = []
        variables: dict[str, Any] = {}

        for arg in field.args:
            var_decls.append(f"${arg.name}: {arg.type.display_name()}")
            arg_refs.append(f"{arg.name}: ${arg.name}")
            variables[arg.name] = self.example_value(arg.type)

        selection = self.build_selection_set(field.type)

        op_name = field.name[:1].upper() + field.name[1:]
        parts = [f"{operation_type} {op_name}"]
        if var_decls:
            parts.append(f"({', '.join(var_decls)})")
        parts.append(f" {{ {field.name}")
        if arg_refs:
            parts.append(f"({', '.join(arg_refs)})")
        if selection:
            parts.append(f" {{ {selection} }}")
        parts.append(" }")

        query = format_graphql("".join(parts))
        logger.debug(
            "Generated %s %s on %s with %d variable(s)",
            operation_type, op_name, root_type_name, len(variables),
        )

        variables_json = ""
        if variables:
            variables_json = json.dumps(variables, indent=2, sort_keys=True)
        return GeneratedOperation(query=query, variables=variables_json)

    def build_selection_set(
        self,
        ref: IRTypeRef,
        visited: set[str] | None = None,
        depth: int = 0,
    ) -> str:
        """Expand the fields selectable on a type reference.

        Returns a space-separated selection without the outer braces, or
        "" for leaves and for anything that cannot be expanded.
        """
        if visited is None:
            visited = set()

        if ref.is_wrapper:
            if ref.of_type is None:
                return ""
            return self.build_selection_set(ref.of_type, visited, depth)

        if not ref.name:
            return ""
        type_def = self.schema.type_by_name(ref.name)
        if type_def is None:
            return ""

        if type_def.kind in ("OBJECT", "INTERFACE"):
            # Guard against circular references along the current branch
            if type_def.name in visited or depth >= self.max_depth:
                return ""
            visited.add(type_def.name)
            selections = []
            for f in type_def.fields:
                sub = self.build_selection_set(f.type, visited, depth + 1)
                if sub:
                    selections.append(f"{f.name} {{ {sub} }}")
                elif self._is_leaf(f.type):
                    selections.append(f.name)
            # Backtrack so sibling branches may select the same type again
            visited.discard(type_def.name)
            return " ".join(selections)

        if type_def.kind == "UNION":
            selections = ["__typename"]
            for possible in type_def.possible_types:
                name = possible.named_type()
                if not name:
                    continue
                sub = self.build_selection_set(
                    IRTypeRef.named(name, "OBJECT"), visited, depth + 1
                )
                if sub:
                    selections.append(f"... on {name} {{ {sub} }}")
            return " ".join(selections)

        return ""

    def _is_leaf(self, ref: IRTypeRef) -> bool:
        """Check if a reference ends in a scalar or enum.

        Types missing from the schema are treated as leaves.
        """
        name = ref.named_type()
        if not name:
            return False
        type_def = self.schema.type_by_name(name)
        return type_def is None or type_def.is_leaf

    def example_value(self, ref: IRTypeRef, visited: set[str] | None = None) -> Any:
        """Synthesize an example JSON value for a type reference.

        ``visited`` is shared for the whole call and never cleared: an
        input object met a second time yields None instead of recursing.
        """
        if visited is None:
            visited = set()

        if ref.kind == "NON_NULL":
            if ref.of_type is None:
                return None
            return self.example_value(ref.of_type, visited)
        if ref.kind == "LIST":
            if ref.of_type is None:
                return []
            return [self.example_value(ref.of_type, visited)]

        name = ref.name
        if not name:
            return None
        if self.scalars.has(name):
            return self.scalars.example(name)

        type_def = self.schema.type_by_name(name)
        if type_def is None or type_def.kind == "SCALAR":
            return self.scalars.example(name)

        if type_def.kind == "ENUM":
            return type_def.enum_values[0].name if type_def.enum_values else None

        if type_def.kind == "INPUT_OBJECT":
            if name in visited:
                return None
            visited.add(name)
            return {
                f.name: self.example_value(f.type, visited)
                for f in type_def.input_fields
            }

        return None


def generate_operation(
    schema: IRSchema,
    operation_type: str,
    root_type_name: str,
    field: IRField,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> GeneratedOperation:
    """Build an operation for ``field`` with a one-off ``QueryBuilder``."""
    return QueryBuilder(schema, max_depth=max_depth).build(
        operation_type, root_type_name, field
    )
