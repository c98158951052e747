"""Async bridge and console output for CLI commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from functools import partial, wraps
from typing import Any, TypeVar

import click

T = TypeVar("T")


def coro(f: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """Run an async click command on a fresh event loop.

    Example:
        @click.command()
        @coro
        async def consume() -> None:
            await worker.run()
    """

    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def _echo(symbol: str, color: str, message: str, *, err: bool = False) -> None:
    click.secho(f"{symbol} {message}", fg=color, err=err)


success = partial(_echo, "✓", "green")
warning = partial(_echo, "⚠", "yellow")
info = partial(_echo, "ℹ", "blue")
error = partial(_echo, "✗", "red", err=True)
