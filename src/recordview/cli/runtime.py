"""Helpers shared by commands to drive the state container."""

import asyncio
from typing import Any, Awaitable, Iterable, TypeVar

import click

from recordview.domain.container import EntityStateContainer
from recordview.domain.entities import ContainerState
from recordview.domain.errors import LoadError

T = TypeVar("T")


def build_container(ctx: click.Context) -> EntityStateContainer:
    """Create a container for the store, schema and user of this invocation."""
    return EntityStateContainer(
        store=ctx.obj["store"],
        schema=ctx.obj["schema"],
        scope=ctx.obj.get("scope"),
    )


def run(awaitable: Awaitable[T]) -> T:
    """Run a container coroutine to completion."""
    return asyncio.run(awaitable)


async def load_or_raise(container: EntityStateContainer) -> ContainerState:
    """Load the collection, raising LoadError when the store failed."""
    state = await container.load()
    if state.error is not None:
        raise LoadError(state.error, "load")
    return state


def parse_scope(value: str | None) -> Any:
    """Scope values that look like integers are used as integers."""
    if value is None or value == "":
        return None
    value = value.strip()
    if value.lstrip("-").isdigit():
        return int(value)
    return value


def parse_key_values(values: Iterable[str], option: str) -> dict[str, str]:
    """Parse repeated KEY=VALUE options into a dict.

    Raises:
        click.BadParameter: If a value has no '=' or an empty key
    """
    result = {}
    for item in values:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{item}'", param_hint=option)
        result[key] = value
    return result
