"""Action representation.

An action is one step of a flow: ``(data, context) -> partial update``.
Callables are wrapped once, at registration time, into one of two
variants so the engine never inspects a callable while running:

- FunctionAction: plain callable (its result is awaited if awaitable)
- CoroutineAction: ``async def`` function

Design: Strategy Pattern
    The engine depends only on Action.invoke(); how a step completes
    (immediately or after suspension) is the variant's concern.

Usage:
    ```python
    @action
    async def fetch_user(data, context):
        user = await context["db"].get(data["user_id"])
        return {**data, "user": user}

    flows.register("signup", [fetch_user, lambda data, ctx: {**data, "ok": True}])
    ```
"""

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

__all__ = ["Action", "FunctionAction", "CoroutineAction", "as_action", "action"]

ActionFn = Callable[[dict[str, Any], Any], Any]


class Action(ABC):
    """A single flow step with one capability: invoke."""

    def __init__(self, fn: Callable[..., Any]):
        self.fn = fn

    @property
    def name(self) -> str:
        return getattr(self.fn, "__qualname__", None) or repr(self.fn)

    @abstractmethod
    async def invoke(self, data: dict[str, Any], context: Any) -> Any:
        """Run the step and return its (unvalidated) result."""

    def __call__(self, data: dict[str, Any], context: Any = None) -> Awaitable[Any]:
        return self.invoke(data, context)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name})"


class FunctionAction(Action):
    """Action backed by a plain callable."""

    async def invoke(self, data: dict[str, Any], context: Any) -> Any:
        result = self.fn(data, context)
        # Only for plain callables that return a coroutine, such as a lambda
        # wrapping an async def, which iscoroutinefunction cannot detect
        if inspect.isawaitable(result):
            result = await result
        return result


class CoroutineAction(Action):
    """Action backed by an ``async def`` function."""

    async def invoke(self, data: dict[str, Any], context: Any) -> Any:
        return await self.fn(data, context)


def as_action(obj: Action | ActionFn) -> Action:
    """Wrap a callable into its Action variant.

    Raises:
        TypeError: If obj is neither an Action nor callable
    """
    if isinstance(obj, Action):
        return obj
    if not callable(obj):
        raise TypeError(f"flow steps must be callable, got {obj!r}")
    if inspect.iscoroutinefunction(obj):
        return CoroutineAction(obj)
    return FunctionAction(obj)


def action(fn: ActionFn) -> Action:
    """Decorator form of as_action()."""
    return as_action(fn)
