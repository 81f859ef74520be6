"""Schema-aware GraphQL tooling: formatting, query generation and validation."""

__version__ = "0.1.0"
