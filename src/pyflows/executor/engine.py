"""Step-advancement engine.

Runs one execute() call as a loop over a ``(flow_name, index, frame)``
cursor. Each iteration:

1. Cycle check: entering a flow already left earlier in this call fails.
2. Terminal check: no action at the cursor, or ``$$.done`` set, ends the
   run (POST_FLOW, then the final copy is returned).
3. Invoke: PRE_ACTION, then the action on a private copy of the data.
   Failures fire EXCEPTION and are re-raised unchanged.
4. Merge: the result must be a mapping; it becomes the next frame. POST_ACTION.
5. Next: follow ``$$.jump`` (at ``$$.i`` or 0), otherwise index + 1.

Suspension only happens while awaiting an action, so for a given call
step N+1 never starts before step N's merge and hooks have completed.

Design: Information Hiding (Parnas)
    The trail, the cursor and the frames are private to one run() call.
    Nothing here is shared between concurrent executions except the
    registries, which are only read.
"""

import logging
from collections.abc import Mapping
from typing import Any

from pyflows.core.action import Action
from pyflows.core.codec import JsonCodec
from pyflows.core.control import Frame
from pyflows.core.errors import ActionResultError, CyclicFlowError
from pyflows.core.events import (
    ExceptionEvent,
    PostActionEvent,
    PostFlowEvent,
    PreActionEvent,
)
from pyflows.core.hook_kind import HookKind
from pyflows.registry import FlowRegistry, HookRegistry

__all__ = ["Engine", "activate"]


def activate(trail: list[str], flow_name: str) -> None:
    """Record entry into flow_name on the activation trail.

    Staying in the current flow (the last entry) adds nothing.

    Raises:
        CyclicFlowError: If flow_name was visited earlier in the trail
    """
    if trail and trail[-1] == flow_name:
        return
    if flow_name in trail:
        raise CyclicFlowError(trail + [flow_name])
    trail.append(flow_name)


class Engine:
    """Executes registered flows.

    Usage:
        ```python
        engine = Engine(flows, hooks, JsonCodec(), logger)
        output = await engine.run(execution_id, "checkout", Frame.from_data(data), context)
        ```
    """

    def __init__(
        self,
        flows: FlowRegistry,
        hooks: HookRegistry,
        codec: JsonCodec,
        logger: logging.Logger,
    ):
        self.flows = flows
        self.hooks = hooks
        self.codec = codec
        self.logger = logger

    async def run(
        self,
        execution_id: str,
        flow_name: str,
        frame: Frame,
        context: Any,
        index: int = 0,
    ) -> dict[str, Any]:
        """Advance through flow_name (and any flows it jumps to) until termination.

        Returns:
            Deep copy of the final data, always carrying a ``$$`` envelope

        Raises:
            CyclicFlowError: If a jump re-enters a flow left earlier
            ActionResultError: If an action returns a non-mapping
            Exception: Whatever an action raised
        """
        trail: list[str] = []

        while True:
            activate(trail, flow_name)

            action = self.flows.action_at(flow_name, index)
            if action is None or frame.is_done:
                output = frame.ensure_control().to_data()
                self.logger.debug(
                    f"[{execution_id}] flow {flow_name} finished at index {index} "
                    f"(trail: {trail})"
                )
                self.hooks.fire(
                    HookKind.POST_FLOW,
                    PostFlowEvent(execution_id, flow_name, output=self.codec.copy(output)),
                )
                return self.codec.copy(output)

            frame = await self._step(execution_id, flow_name, index, action, frame, context)

            jump = frame.jump_target
            if jump is not None:
                frame = frame.with_control(frame.control.without_jump())
                index = frame.control.start_index
                self.logger.debug(f"[{execution_id}] jump {flow_name} -> {jump} at index {index}")
                flow_name = jump
            else:
                index += 1

    async def _step(
        self,
        execution_id: str,
        flow_name: str,
        index: int,
        action: Action,
        frame: Frame,
        context: Any,
    ) -> Frame:
        data = frame.to_data()

        self.logger.debug(f"[{execution_id}] {flow_name}#{index} {action.name}")
        self.hooks.fire(
            HookKind.PRE_ACTION,
            PreActionEvent(execution_id, flow_name, index, action, input=self.codec.copy(data)),
        )

        try:
            result = await action.invoke(self.codec.copy(data), context)
            if not isinstance(result, Mapping):
                raise ActionResultError(flow_name, index, result)
            next_frame = Frame.from_data(self.codec.copy(frame.merge(result)))
        except Exception as error:
            self.logger.debug(f"[{execution_id}] {flow_name}#{index} failed: {error!r}")
            self.hooks.fire_all(
                HookKind.EXCEPTION,
                ExceptionEvent(
                    execution_id, flow_name, index, action, input=self.codec.copy(data), error=error
                ),
            )
            raise

        self.hooks.fire(
            HookKind.POST_ACTION,
            PostActionEvent(
                execution_id,
                flow_name,
                index,
                action,
                input=self.codec.copy(data),
                output=self.codec.copy(next_frame.to_data()),
            ),
        )
        return next_frame
