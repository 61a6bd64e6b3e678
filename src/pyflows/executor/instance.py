"""
Flows - registration and execution facade.

Design Pattern: Façade Pattern
Flows hides the FlowRegistry, HookRegistry, codec and Engine behind four
calls: register(), hook(), execute() and register_directory().

Usage:
    ```python
    flows = Flows()

    flows.register("checkout", [validate_cart, reserve_stock, charge_card])
    flows.register("payment_failed", [release_stock, notify_user])
    flows.hook(HookKind.EXCEPTION, lambda e: logger.error(f"{e.flow_name}: {e.error}"))

    output = await flows.execute("checkout", {"cart_id": "c-42"}, context={"db": db})
    ```
"""

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

from uuid_extensions import uuid7

from pyflows import loader
from pyflows.core.action import Action, ActionFn
from pyflows.core.codec import DEFAULT_CODEC, JsonCodec
from pyflows.core.control import Frame
from pyflows.core.events import PreFlowEvent
from pyflows.core.hook_kind import HookKind
from pyflows.executor.engine import Engine
from pyflows.registry import FlowRegistry, HookCallback, HookRegistry

__all__ = ["Flows", "execute_flow"]

F = Callable[..., Any]


class Flows:
    """
    Register named flows and hooks, then execute flows by name.

    Registration is expected to be finished before the first execute().
    After that the instance may serve any number of concurrent execute()
    calls; each one has its own data, trail and execution id.

    Args:
        logger: Logger for registration and transition messages
            (default: the "pyflows" logger)
        codec: Codec used for every deep copy (default: JsonCodec())
    """

    def __init__(self, logger: logging.Logger | None = None, codec: JsonCodec | None = None):
        self.logger = logger or logging.getLogger("pyflows")
        self.codec = codec or DEFAULT_CODEC
        self._flows = FlowRegistry(logger=self.logger)
        self._hooks = HookRegistry(logger=self.logger)
        self._engine = Engine(self._flows, self._hooks, self.codec, self.logger)

    @property
    def flows(self) -> FlowRegistry:
        return self._flows

    @property
    def hooks(self) -> HookRegistry:
        return self._hooks

    def register(self, name: str, steps: Iterable[Action | ActionFn]) -> None:
        """Register steps under name (see FlowRegistry.register for the init rule)."""
        self._flows.register(name, steps)

    def register_directory(self, folder: str | Path) -> list[str]:
        """Register every flow module found under folder.

        Returns:
            Names passed to register(), in registration order
        """
        return loader.register_directory(self, folder)

    def hook(self, kind: HookKind | str, callback: HookCallback) -> None:
        """Add an observer for kind.

        Raises:
            UnknownHookError: If kind is not a HookKind
        """
        self._hooks.add(kind, callback)

    def on(self, kind: HookKind | str) -> Callable[[F], F]:
        """Decorator form of hook().

        Example:
            ```python
            @flows.on(HookKind.POST_FLOW)
            def record(event):
                results.append(event.output)
            ```
        """
        kind = HookKind.parse(kind)

        def decorator(fn: F) -> F:
            self._hooks.add(kind, fn)
            return fn

        return decorator

    async def execute(
        self, flow_name: str, data: Any = None, context: Any = None
    ) -> dict[str, Any]:
        """
        Run flow_name on a copy of data.

        An unknown flow is not an error: a warning is logged, no hook fires
        and the copied data is returned unchanged.

        Args:
            flow_name: Registered flow to start with
            data: Initial payload, a JSON-serializable mapping (None means {})
            context: Passed as-is to every action (None means a fresh {})

        Returns:
            The final data, including its ``$$`` envelope

        Raises:
            DataCodecError: If data is not serializable
            InvalidDataError: If data is not a mapping
            CyclicFlowError: If a jump re-enters an earlier flow
            ActionResultError: If an action returns a non-mapping
            Exception: Whatever an action raised
        """
        data = self.codec.copy({} if data is None else data)

        if flow_name not in self._flows:
            self.logger.warning(f"{flow_name} flow does not exist! Skipped")
            return data

        if context is None:
            context = {}

        frame = Frame.from_data(data)
        execution_id = str(uuid7())

        self.logger.debug(f"[{execution_id}] execute {flow_name}")
        self._hooks.fire(
            HookKind.PRE_FLOW,
            PreFlowEvent(execution_id, flow_name, input=self.codec.copy(data)),
        )

        return await self._engine.run(execution_id, flow_name, frame, context)

    def __repr__(self) -> str:
        return f"Flows(flows={len(self._flows)}, hooks={len(self._hooks)})"


async def execute_flow(
    flows: Flows, flow_name: str, data: Any = None, context: Any = None
) -> dict[str, Any]:
    """
    Convenience function mirroring Flows.execute().

    Example:
        ```python
        output = await execute_flow(flows, "checkout", {"cart_id": "c-42"})
        ```
    """
    return await flows.execute(flow_name, data, context)
