"""Scalar handlers for example-value synthesis and variable checking.

Each handler knows two things about a GraphQL scalar: a plausible example
value to put in a generated variables object, and how to tell whether a
decoded JSON value is acceptable for it.

Example usage:
    from gql_qla.core.scalars import ScalarRegistry

    registry = ScalarRegistry()
    registry.example("Int")          # 42
    registry.check("Int", 5.5)       # "expected integer for Int"

    # Custom scalar with its own rules
    class DateTimeHandler:
        example = "2024-01-01T00:00:00Z"

        def check(self, value):
            if not isinstance(value, str):
                return "expected string for DateTime"
            return None

    registry.register("DateTime", DateTimeHandler())
"""

from typing import Any, Protocol, runtime_checkable

# Example used for scalars without a handler
DEFAULT_EXAMPLE = "example"


@runtime_checkable
class ScalarHandler(Protocol):
    """Protocol for scalar handlers.

    Attributes:
        example: JSON-serializable example value for generated variables
    """

    example: Any

    def check(self, value: Any) -> str | None:
        """Return an error message if ``value`` is not valid, else None."""
        ...


class StringHandler:
    """Handler for String and ID scalars."""

    def __init__(self, name: str = "String", example: str = "example"):
        self.name = name
        self.example = example

    def check(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return f"expected string for {self.name}"
        return None


class IntHandler:
    """Handler for Int: any JSON number with an integral value."""

    example = 42

    def check(self, value: Any) -> str | None:
        # bool is an int subclass but never a JSON number
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "expected number for Int"
        if isinstance(value, float) and not value.is_integer():
            return "expected integer for Int"
        return None


class FloatHandler:
    """Handler for Float: any JSON number."""

    example = 3.14

    def check(self, value: Any) -> str | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "expected number for Float"
        return None


class BooleanHandler:
    """Handler for Boolean."""

    example = False

    def check(self, value: Any) -> str | None:
        if not isinstance(value, bool):
            return "expected boolean for Boolean"
        return None


class ScalarRegistry:
    """Registry of scalar handlers, keyed by GraphQL scalar name.

    The five built-in scalars are registered on construction. Scalars
    without a handler get ``"example"`` as their example value and accept
    any JSON value.
    """

    def __init__(self):
        self._handlers: dict[str, ScalarHandler] = {}
        self._register_defaults()

    def _register_defaults(self):
        """Register handlers for the built-in scalars."""
        self.register("String", StringHandler("String", "example"))
        self.register("ID", StringHandler("ID", "1"))
        self.register("Int", IntHandler())
        self.register("Float", FloatHandler())
        self.register("Boolean", BooleanHandler())

    def register(self, scalar_name: str, handler: ScalarHandler):
        """Register a handler for a scalar type."""
        self._handlers[scalar_name] = handler

    def get(self, scalar_name: str) -> ScalarHandler | None:
        """Get the handler for a scalar type, or None if not registered."""
        return self._handlers.get(scalar_name)

    def has(self, scalar_name: str) -> bool:
        """Check if a handler is registered for a scalar type."""
        return scalar_name in self._handlers

    def example(self, scalar_name: str) -> Any:
        """Return the example value for a scalar."""
        handler = self.get(scalar_name)
        return handler.example if handler else DEFAULT_EXAMPLE

    def check(self, scalar_name: str, value: Any) -> str | None:
        """Check a JSON value against a scalar, returning an error message or None."""
        handler = self.get(scalar_name)
        if handler is None:
            return None
        return handler.check(value)


default_registry = ScalarRegistry()
