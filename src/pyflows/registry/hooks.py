"""Hook registry: ordered observer lists per hook kind.

Design Pattern: Observer Pattern
Flows (the subject) notify registered callbacks at each transition.

Callbacks run synchronously, in registration order. An observer raising
propagates out of fire(); the engine decides whether that is fatal.
fire_all() is the exception to that rule and is used while an action
failure is already being reported.
"""

import logging
from collections.abc import Callable

from pyflows.core.events import FlowEvent
from pyflows.core.hook_kind import HookKind

__all__ = ["HookRegistry", "HookCallback"]

HookCallback = Callable[[FlowEvent], object]


class HookRegistry:
    """
    Append-only observer lists, one per HookKind.

    Usage:
        ```python
        hooks = HookRegistry()
        hooks.add(HookKind.PRE_FLOW, lambda event: print(event.flow_name))
        hooks.fire(HookKind.PRE_FLOW, event)
        ```
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._callbacks: dict[HookKind, list[HookCallback]] = {kind: [] for kind in HookKind}
        self._logger = logger or logging.getLogger(__name__)

    def add(self, kind: HookKind | str, callback: HookCallback) -> None:
        """Append callback to the observers of kind.

        Raises:
            UnknownHookError: If kind is not a HookKind
            TypeError: If callback is not callable
        """
        kind = HookKind.parse(kind)
        if not callable(callback):
            raise TypeError(f"hook callback must be callable, got {callback!r}")

        self._callbacks[kind].append(callback)
        self._logger.debug(f"Registered {kind} hook: {getattr(callback, '__qualname__', callback)}")

    def callbacks(self, kind: HookKind | str) -> tuple[HookCallback, ...]:
        return tuple(self._callbacks[HookKind.parse(kind)])

    def fire(self, kind: HookKind | str, event: FlowEvent) -> None:
        """Notify every observer of kind, in order. Observer errors propagate."""
        for callback in self._callbacks[HookKind.parse(kind)]:
            callback(event)

    def fire_all(self, kind: HookKind | str, event: FlowEvent) -> None:
        """Notify every observer of kind, logging instead of raising observer errors."""
        for callback in self._callbacks[HookKind.parse(kind)]:
            try:
                callback(event)
            except Exception:
                self._logger.exception(f"{kind} hook {callback!r} failed")

    def __len__(self) -> int:
        return sum(len(callbacks) for callbacks in self._callbacks.values())

    def __repr__(self) -> str:
        counts = ", ".join(f"{kind}={len(cbs)}" for kind, cbs in self._callbacks.items())
        return f"HookRegistry({counts})"
