"""
Hook event payloads.

One frozen dataclass per hook kind. Every event carries the id of the
execute() call it belongs to, so observers can correlate events from
interleaved executions, and the name of the flow being run.

Data fields (input/output) are private deep copies of the flow data in
wire form: observers may keep or mutate them without affecting the run.

Example:
    ```python
    def audit(event: PostActionEvent) -> None:
        print(f"[{event.execution_id}] {event.flow_name}#{event.i}: {event.output}")

    flows.hook(HookKind.POST_ACTION, audit)
    ```
"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pyflows.core.action import Action
from pyflows.core.hook_kind import HookKind

__all__ = [
    "FlowEvent",
    "ActionEvent",
    "PreFlowEvent",
    "PostFlowEvent",
    "PreActionEvent",
    "PostActionEvent",
    "ExceptionEvent",
]


@dataclass(frozen=True)
class FlowEvent:
    execution_id: str
    flow_name: str

    kind = None  # overridden per subclass


@dataclass(frozen=True)
class PreFlowEvent(FlowEvent):
    input: dict[str, Any]

    kind = HookKind.PRE_FLOW


@dataclass(frozen=True)
class PostFlowEvent(FlowEvent):
    output: dict[str, Any]

    kind = HookKind.POST_FLOW


@dataclass(frozen=True)
class ActionEvent(FlowEvent):
    """Base of the events fired around a single action.

    Attributes:
        i: Index of the action within flow_name
        action: The Action wrapper the engine invoked
        input: The data the action was given
    """

    i: int
    action: Action
    input: dict[str, Any]

    @property
    def action_fn(self) -> Callable[..., Any]:
        """The callable registered for this step (``event.action_fn is my_step``)."""
        return self.action.fn


@dataclass(frozen=True)
class PreActionEvent(ActionEvent):
    kind = HookKind.PRE_ACTION


@dataclass(frozen=True)
class PostActionEvent(ActionEvent):
    output: dict[str, Any]

    kind = HookKind.POST_ACTION


@dataclass(frozen=True)
class ExceptionEvent(ActionEvent):
    """Action failure report.

    Attributes:
        error: The exception about to be re-raised to the execute() caller
    """

    error: BaseException

    kind = HookKind.EXCEPTION
