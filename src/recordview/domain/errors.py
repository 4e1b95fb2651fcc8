"""Shared domain error messages and error types."""

from typing import Any


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested record does not exist for the current scope."""


class ScopeMismatchError(NotFoundError):
    """A fetched record belongs to a different scope than the session."""


class ScopeError(DomainError):
    """An operation needs a scope but the container has none."""


class StoreError(DomainError):
    """The record store failed or returned an invalid response."""


class RecordNotFoundError(StoreError):
    """The record store has no record with the requested id."""


class ContainerError(DomainError):
    """Error surfaced by the state container to its view layer."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message)
        self.operation = operation


class LoadError(ContainerError):
    """Loading the collection from the store failed."""


class MutationError(ContainerError):
    """A create, update or delete call failed; canonical state is unchanged."""


def load_failed(collection: str, cause: BaseException | None = None) -> str:
    """Return message for a failed collection load."""
    return _with_cause(f"Failed to load {collection}", cause)


def mutation_failed(operation: str, item_name: str, cause: BaseException | None = None) -> str:
    """Return message for a failed create/update/delete."""
    return _with_cause(f"Failed to {operation} {item_name}", cause)


def record_not_found(item_name: str, record_id: Any) -> str:
    """Return message for a record missing from the store."""
    return f"{item_name.capitalize()} {record_id} not found"


def record_not_in_scope(item_name: str, record_id: Any) -> str:
    """Return message for a record owned by another scope."""
    return f"{item_name.capitalize()} {record_id} not found for current user"


def scope_required(item_name: str) -> str:
    """Return message when a scoped collection is used without a scope."""
    return f"Cannot modify {item_name}: user is not authenticated"


def invalid_record(reason: str) -> str:
    """Return message for a store response that is not a valid record."""
    return f"Invalid record from store: {reason}"


def _with_cause(message: str, cause: BaseException | None) -> str:
    if cause is None or not str(cause):
        return message
    return f"{message}: {cause}"
