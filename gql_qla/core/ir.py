"""Intermediate Representation (IR) for introspected GraphQL schemas.

The models mirror the standard introspection result shape, so a decoded
``__schema`` object validates straight into an ``IRSchema``. Keys use the
introspection camelCase spelling on input (``ofType``, ``inputFields``...)
while the Python attributes are snake_case; both spellings are accepted
when constructing models by hand.

All models are frozen: a schema is built once and only read afterwards.
Types reference each other by name, never by object, so self-referential
and mutually recursive schemas are just lookup tables.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, PrivateAttr, field_validator
from pydantic.alias_generators import to_camel

OPERATION_TYPES = ("query", "mutation", "subscription")

BUILTIN_SCALARS = frozenset({"String", "Int", "Float", "Boolean", "ID"})

LEAF_KINDS = frozenset({"SCALAR", "ENUM"})


class IRModel(BaseModel):
    """Base for all IR models: camelCase aliases, immutable."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class IRTypeRef(IRModel):
    """A possibly wrapped reference to a named type.

    ``NON_NULL`` and ``LIST`` refs wrap ``of_type``; any other kind is a
    named reference whose ``name`` may be missing when the introspection
    query did not go deep enough.
    """
    kind: str = ""
    name: str | None = None
    of_type: "IRTypeRef | None" = None

    @classmethod
    def named(cls, name: str, kind: str = "SCALAR") -> "IRTypeRef":
        return cls(kind=kind, name=name)

    @classmethod
    def non_null(cls, inner: "IRTypeRef") -> "IRTypeRef":
        return cls(kind="NON_NULL", of_type=inner)

    @classmethod
    def list_of(cls, inner: "IRTypeRef") -> "IRTypeRef":
        return cls(kind="LIST", of_type=inner)

    @property
    def is_wrapper(self) -> bool:
        return self.kind in ("NON_NULL", "LIST")

    def display_name(self) -> str:
        """Render the reference the way it is written in GraphQL, e.g. ``[Post!]!``."""
        if self.kind == "NON_NULL":
            if self.of_type is not None:
                return self.of_type.display_name() + "!"
        elif self.kind == "LIST":
            if self.of_type is not None:
                return f"[{self.of_type.display_name()}]"
        elif self.name is not None:
            return self.name
        return "Unknown"

    def named_type(self) -> str:
        """Return the innermost type name, or an empty string if unresolved."""
        if self.name is not None:
            return self.name
        if self.of_type is not None:
            return self.of_type.named_type()
        return ""


class IRInputValue(IRModel):
    """A field argument or an input object field."""
    name: str
    type: IRTypeRef
    description: str | None = None
    # SDL literal text, e.g. '"foo"' or '10'
    default_value: str | None = None


class IRField(IRModel):
    """A field on an OBJECT or INTERFACE type."""
    name: str
    type: IRTypeRef
    description: str | None = None
    args: list[IRInputValue] = []
    is_deprecated: bool = False
    deprecation_reason: str | None = None

    @field_validator("args", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class IREnumValue(IRModel):
    """A single value of an ENUM type."""
    name: str
    description: str | None = None
    is_deprecated: bool = False
    deprecation_reason: str | None = None


class IRFullType(IRModel):
    """A complete type from the introspection result."""
    kind: str
    name: str
    description: str | None = None
    fields: list[IRField] = []
    input_fields: list[IRInputValue] = []
    enum_values: list[IREnumValue] = []
    possible_types: list[IRTypeRef] = []
    interfaces: list[IRTypeRef] = []

    # Introspection reports null rather than [] for lists that do not
    # apply to the kind
    @field_validator(
        "fields", "input_fields", "enum_values", "possible_types", "interfaces",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_leaf(self) -> bool:
        """Scalars and enums take no sub-selection."""
        return self.kind in LEAF_KINDS

    def field_by_name(self, name: str) -> IRField | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


class IRSchema(IRModel):
    """Complete intermediate representation of an introspected schema."""
    query_type: IRTypeRef | None = None
    mutation_type: IRTypeRef | None = None
    subscription_type: IRTypeRef | None = None
    types: list[IRFullType] = []

    _index: dict[str, IRFullType] = PrivateAttr(default_factory=dict)

    @field_validator("types", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    def model_post_init(self, __context: Any) -> None:
        # Duplicate names: the first declaration wins
        for t in self.types:
            self._index.setdefault(t.name, t)

    def type_by_name(self, name: str) -> IRFullType | None:
        """Look up a type by its exact name."""
        return self._index.get(name)

    def root_type_ref(self, operation_type: str) -> IRTypeRef | None:
        """Return the root ref for 'query', 'mutation' or 'subscription'."""
        if operation_type not in OPERATION_TYPES:
            raise ValueError(f"Unknown operation type: {operation_type}")
        return getattr(self, f"{operation_type}_type")

    def root_type_for(self, operation_type: str) -> IRFullType | None:
        """Resolve the root type of an operation kind, if the schema has one."""
        ref = self.root_type_ref(operation_type)
        if ref is None or ref.name is None:
            return None
        return self.type_by_name(ref.name)

    def root_types(self) -> list[IRFullType]:
        """Return the root operation types present, in query/mutation/subscription order."""
        roots = []
        for operation_type in OPERATION_TYPES:
            root = self.root_type_for(operation_type)
            if root is not None:
                roots.append(root)
        return roots

    def root_field(self, operation_type: str, field_name: str) -> tuple[IRFullType, IRField] | None:
        """Find a field on a root operation type, returning (root type, field)."""
        root = self.root_type_for(operation_type)
        if root is None:
            return None
        field = root.field_by_name(field_name)
        if field is None:
            return None
        return root, field
