"""Entity state container.

Owns the canonical record collection for one collection and scope, keeps it
synchronized with a RecordStore, and exposes a derived view (filtered,
sorted, totalled) that is recomputed on every state change.

All reconciliation happens on the event loop thread: each store response is
applied in one synchronous step, so listeners never observe a half-applied
response. Responses that were overtaken by a newer request are discarded:

- loads carry a ticket; only the most recently issued load may apply;
- update/remove carry a per-record ticket; only the latest mutation issued
  for a record may apply;
- every response carries the session it was issued in; ``set_scope`` and
  ``reset`` start a new session.
"""

import asyncio
from decimal import Decimal
from typing import (
    Any,
    Awaitable,
    Callable,
    Mapping,
    NoReturn,
    Optional,
    TypeVar,
    Union,
    assert_never,
)

from recordview.domain.actions import (
    Action,
    ClearSelection,
    Create,
    Delete,
    Load,
    Select,
    SetFilter,
    Update,
)
from recordview.domain.entities import (
    ContainerState,
    FilterCriteria,
    Record,
    RecordId,
    RecordSchema,
    same_id,
)
from recordview.domain.errors import (
    MutationError,
    NotFoundError,
    RecordNotFoundError,
    ScopeError,
    ScopeMismatchError,
    load_failed,
    mutation_failed,
    record_not_found,
    record_not_in_scope,
    scope_required,
)
from recordview.domain.records import normalize_record, normalize_records, outgoing_fields
from recordview.domain.view import apply_filters_and_sort, calculate_total, collect_facets
from recordview.store.base import RecordStore
from recordview.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")
Listener = Callable[[ContainerState], None]


class EntityStateContainer:
    """State container for one record collection."""

    def __init__(
        self,
        store: RecordStore,
        schema: RecordSchema,
        scope: Any = None,
        filters: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize the container.

        Args:
            store: Record store the collection is synchronized with
            schema: Schema of the collection
            scope: Current scope value (e.g. user id), if the schema is scoped
            filters: Initial filter overrides merged over the schema defaults
        """
        self.store = store
        self.schema = schema
        self._scope = scope
        self._initial_filters = dict(filters or {})
        self._listeners: list[Listener] = []

        self._load_ticket = 0
        self._ticket_counter = 0
        self._record_tickets: dict[str, int] = {}
        self._session = 0
        self._pending_mutations = 0
        self._version = 0
        self._clear()
        self._state = self._snapshot()

    def _clear(self) -> None:
        self._canonical: list[Record] = []
        self._filters = self.schema.default_filters().merge(self._initial_filters)
        self._selected: Optional[Record] = None
        self._is_loading = False
        self._error: Optional[str] = None

    # Read-only state
    @property
    def state(self) -> ContainerState:
        """Snapshot of everything the view layer may read."""
        return self._state

    @property
    def scope(self) -> Any:
        return self._scope

    @property
    def records(self) -> tuple[Record, ...]:
        """Canonical records in reception order."""
        return tuple(self._canonical)

    @property
    def visible(self) -> tuple[Record, ...]:
        return self._state.visible

    @property
    def total(self) -> Decimal:
        """Sum of amounts over the visible records."""
        return self._state.total

    @property
    def grand_total(self) -> Decimal:
        """Sum of amounts over all canonical records."""
        return self._state.grand_total

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def selected(self) -> Optional[Record]:
        return self._state.selected

    @property
    def filters(self) -> FilterCriteria:
        return self._state.filters

    @property
    def facets(self) -> Mapping[str, tuple[str, ...]]:
        return self._state.facets

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Session
    def set_scope(self, scope: Any) -> None:
        """Switch to another scope, discarding all state of the previous one."""
        if scope == self._scope:
            return
        logger.info("Scope for %s changed", self.schema.name)
        self._scope = scope
        self.reset()

    def reset(self) -> None:
        """Return to the initial empty state and ignore in-flight responses."""
        self._session += 1
        self._load_ticket += 1
        self._record_tickets.clear()
        self._clear()
        self._version += 1
        self._refresh()

    # Operations
    async def load(self) -> ContainerState:
        """Replace the canonical collection with the store's records.

        Without a scope on a scoped schema the container resets to the empty
        state and the store is not called. Failures set ``error`` and keep
        the previous records.
        """
        if self.schema.scope_field is not None and self._scope is None:
            logger.debug("No scope for %s, resetting instead of loading", self.schema.name)
            self.reset()
            return self._state

        self._load_ticket += 1
        ticket = self._load_ticket
        session = self._session
        self._is_loading = True
        self._error = None
        self._refresh()

        params = None
        if self.schema.scope_field is not None:
            params = {self.schema.scope_field: self._scope}

        try:
            records = normalize_records(await self.store.list_records(params), self.schema)
        except asyncio.CancelledError:
            if self._is_current_load(ticket, session):
                self._is_loading = False
                self._refresh()
            raise
        except Exception as e:
            if not self._is_current_load(ticket, session):
                logger.debug("Discarding failure of superseded %s load", self.schema.name)
                return self._state
            self._is_loading = False
            self._error = load_failed(self.schema.name, e)
            logger.warning("%s", self._error)
            self._refresh()
            return self._state

        if not self._is_current_load(ticket, session):
            logger.debug("Discarding superseded %s load response", self.schema.name)
            return self._state

        self._canonical = records
        self._is_loading = False
        self._error = None
        self._version += 1
        logger.debug("Loaded %d %s", len(records), self.schema.name)
        self._refresh()
        return self._state

    async def create(self, fields: Mapping[str, Any]) -> Record:
        """Create a record in the store and append the stored version.

        Any ``id`` in ``fields`` is dropped; the store assigns ids.

        Raises:
            ScopeError: If the schema is scoped and there is no scope
            MutationError: If the store call fails
        """
        payload = self._outgoing(fields)
        session = self._session
        record = await self._mutation_call(
            "create", lambda: self.store.create_record(payload), self._normalize
        )

        if session != self._session:
            logger.debug("Discarding %s created in a previous session", self.schema.item_name)
            self._refresh()
            return record

        if self._index_of(record.id) is None:
            self._canonical = [*self._canonical, record]
        else:
            self._canonical = self._replaced(record.id, record)
        self._error = None
        self._version += 1
        logger.info("Created %s %s", self.schema.item_name, record.id)
        self._refresh()
        return record

    async def update(self, record_id: RecordId, fields: Mapping[str, Any]) -> Record:
        """Replace a record in the store and in the canonical collection.

        Raises:
            ScopeError: If the schema is scoped and there is no scope
            MutationError: If the store call fails
        """
        payload = self._outgoing(fields)
        session = self._session
        ticket = self._issue_ticket(record_id)
        try:
            record = await self._mutation_call(
                "update", lambda: self.store.update_record(record_id, payload), self._normalize
            )
        except MutationError:
            self._release_ticket(record_id, ticket)
            raise

        if not self._is_current_mutation(record_id, ticket, session):
            logger.debug("Discarding superseded update of %s %s", self.schema.item_name, record_id)
            self._refresh()
            return record
        self._release_ticket(record_id, ticket)

        if self._index_of(record_id) is None:
            logger.debug("%s %s no longer loaded, update not applied", self.schema.item_name, record_id)
            self._refresh()
            return record

        self._canonical = self._replaced(record_id, record)
        self._error = None
        self._version += 1
        logger.info("Updated %s %s", self.schema.item_name, record_id)
        self._refresh()
        return record

    async def remove(self, record_id: RecordId) -> None:
        """Delete a record from the store and from the canonical collection.

        A confirmed delete is always applied within its session. If a later
        update of the same id is still pending, the id gets a new ticket so
        that update is discarded when it resolves.

        Raises:
            MutationError: If the store call fails
        """
        session = self._session
        ticket = self._issue_ticket(record_id)
        try:
            await self._mutation_call("delete", lambda: self.store.delete_record(record_id))
        except MutationError:
            self._release_ticket(record_id, ticket)
            raise

        if session != self._session:
            logger.debug("Discarding delete of %s %s from a previous session", self.schema.item_name, record_id)
            self._refresh()
            return
        if self._record_tickets.get(str(record_id)) != ticket:
            self._issue_ticket(record_id)
        else:
            self._release_ticket(record_id, ticket)

        self._canonical = [record for record in self._canonical if not same_id(record.id, record_id)]
        self._error = None
        self._version += 1
        logger.info("Deleted %s %s", self.schema.item_name, record_id)
        self._refresh()

    def set_filter(self, partial: Optional[Mapping[str, Any]] = None, **changes: Any) -> ContainerState:
        """Shallow-merge filter changes and recompute the view."""
        merged = dict(partial or {})
        merged.update(changes)
        self._filters = self._filters.merge(merged)
        self._refresh()
        return self._state

    async def select(self, target: Union[Record, RecordId]) -> Record:
        """Select a record for editing.

        The record is looked up in the canonical collection first. Otherwise
        it is fetched from the store, checked against the current scope and
        added to the canonical collection.

        Raises:
            NotFoundError: If the record cannot be found for this scope
        """
        record_id = target.id if isinstance(target, Record) else target

        local = self._find(record_id)
        if local is not None:
            self._selected = local
            self._refresh()
            return local

        scoped = self.schema.scope_field is not None
        if scoped and self._scope is None:
            self._not_found(NotFoundError(record_not_in_scope(self.schema.item_name, record_id)))

        session = self._session
        try:
            record = self._normalize(await self.store.get_record(record_id))
        except RecordNotFoundError as e:
            self._not_found(NotFoundError(record_not_found(self.schema.item_name, record_id)), e)
        except Exception as e:
            message = f"{record_not_found(self.schema.item_name, record_id)}: {e}"
            self._not_found(NotFoundError(message), e)

        if scoped and str(record.get(self.schema.scope_field)) != str(self._scope):
            self._not_found(ScopeMismatchError(record_not_in_scope(self.schema.item_name, record_id)))

        if session != self._session:
            logger.debug("Discarding %s fetched in a previous session", self.schema.item_name)
            return record

        local = self._find(record.id)
        if local is None:
            self._canonical = [*self._canonical, record]
            self._version += 1
            local = record
        self._selected = local
        self._error = None
        self._refresh()
        return local

    def clear_selection(self) -> None:
        self._selected = None
        self._refresh()

    async def dispatch(self, action: Action) -> Any:
        """Run one action and return what the matching method returns."""
        match action:
            case Load():
                return await self.load()
            case Create(fields=fields):
                return await self.create(fields)
            case Update(record_id=record_id, fields=fields):
                return await self.update(record_id, fields)
            case Delete(record_id=record_id):
                return await self.remove(record_id)
            case SetFilter(changes=changes):
                return self.set_filter(changes)
            case Select(target=target):
                return await self.select(target)
            case ClearSelection():
                return self.clear_selection()
            case _:
                assert_never(action)

    # Internals
    async def _mutation_call(
        self,
        operation: str,
        call: Callable[[], Awaitable[Any]],
        parse: Optional[Callable[[Any], T]] = None,
    ) -> Optional[T]:
        """Run a store mutation, turning any failure into MutationError.

        The pending counter is decremented on success without publishing a
        new state; the caller publishes it together with the reconciliation.
        """
        self._pending_mutations += 1
        self._refresh()
        try:
            raw = await call()
            result = parse(raw) if parse is not None else None
        except Exception as e:
            message = mutation_failed(operation, self.schema.item_name, e)
            self._pending_mutations -= 1
            self._error = message
            logger.warning("%s", message)
            self._refresh()
            raise MutationError(message, operation) from e
        except BaseException:
            self._pending_mutations -= 1
            self._refresh()
            raise
        self._pending_mutations -= 1
        return result

    def _normalize(self, raw: Any) -> Record:
        return normalize_record(raw, self.schema)

    def _outgoing(self, fields: Mapping[str, Any]) -> dict[str, Any]:
        scope_field = self.schema.scope_field
        if scope_field is not None and self._scope is None:
            raise ScopeError(scope_required(self.schema.item_name))
        return outgoing_fields(fields, scope_field, self._scope)

    def _not_found(self, error: NotFoundError, cause: Optional[BaseException] = None) -> NoReturn:
        self._error = str(error)
        logger.warning("%s", error)
        self._refresh()
        raise error from cause

    def _is_current_load(self, ticket: int, session: int) -> bool:
        return ticket == self._load_ticket and session == self._session

    def _issue_ticket(self, record_id: RecordId) -> int:
        self._ticket_counter += 1
        self._record_tickets[str(record_id)] = self._ticket_counter
        return self._ticket_counter

    def _release_ticket(self, record_id: RecordId, ticket: int) -> None:
        if self._record_tickets.get(str(record_id)) == ticket:
            del self._record_tickets[str(record_id)]

    def _is_current_mutation(self, record_id: RecordId, ticket: int, session: int) -> bool:
        return session == self._session and self._record_tickets.get(str(record_id)) == ticket

    def _index_of(self, record_id: RecordId) -> Optional[int]:
        for index, record in enumerate(self._canonical):
            if same_id(record.id, record_id):
                return index
        return None

    def _find(self, record_id: RecordId) -> Optional[Record]:
        index = self._index_of(record_id)
        return None if index is None else self._canonical[index]

    def _replaced(self, record_id: RecordId, record: Record) -> list[Record]:
        """Canonical list with ``record_id`` replaced by ``record``.

        Another entry already holding ``record.id`` is dropped to keep ids unique.
        """
        result = []
        for existing in self._canonical:
            if same_id(existing.id, record_id):
                result.append(record)
            elif not same_id(existing.id, record.id):
                result.append(existing)
        return result

    def _refresh(self) -> None:
        if self._selected is not None:
            self._selected = self._find(self._selected.id)
        self._state = self._snapshot()
        for listener in list(self._listeners):
            listener(self._state)

    def _snapshot(self) -> ContainerState:
        view = apply_filters_and_sort(self._canonical, self._filters, self.schema)
        return ContainerState(
            visible=view.visible,
            total=view.total,
            grand_total=calculate_total(self._canonical),
            is_loading=self._is_loading,
            error=None if self._is_loading else self._error,
            selected=self._selected,
            filters=self._filters,
            version=self._version,
            pending_mutations=self._pending_mutations,
            facets=collect_facets(self._canonical, self.schema),
        )
