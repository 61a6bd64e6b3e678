"""Exception types raised by pyflows.

Every engine-level failure derives from FlowsError so callers can catch
them as one family. Errors raised by user actions are never wrapped: they
reach the caller of execute() unchanged.

Each error also derives from the closest builtin (ValueError, TypeError,
LookupError, ImportError) so generic handlers keep working.
"""

from typing import Any

__all__ = [
    "FlowsError",
    "UnknownHookError",
    "FlowNotFoundError",
    "ActionResultError",
    "CyclicFlowError",
    "DataCodecError",
    "InvalidDataError",
    "InvalidControlError",
    "FlowLoadError",
]


class FlowsError(Exception):
    """Base exception for all pyflows errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class UnknownHookError(FlowsError, ValueError):
    """Hook kind is not one of the supported kinds."""

    def __init__(self, kind: Any):
        super().__init__(
            f"Hook {kind!r} is not a known hook, "
            "expected one of PRE_ACTION, POST_ACTION, PRE_FLOW, POST_FLOW, EXCEPTION",
            context={"kind": kind},
        )
        self.kind = kind


class FlowNotFoundError(FlowsError, LookupError):
    """No action registered at the requested (flow, index) position."""

    def __init__(self, flow_name: str, index: int | None = None):
        if index is None:
            message = f"flow {flow_name!r} does not exist"
        else:
            message = f"flow {flow_name!r} has no action at index {index}"
        super().__init__(message, context={"flow_name": flow_name, "index": index})
        self.flow_name = flow_name
        self.index = index


class ActionResultError(FlowsError, TypeError):
    """An action returned something other than a mapping.

    Attributes:
        flow_name: Flow the action belongs to
        index: Position of the action in the flow
        result: The offending return value
    """

    def __init__(self, flow_name: str, index: int, result: Any):
        super().__init__(
            f"in flow {flow_name!r} action number {index} returned {result!r} "
            "instead of a mapping; actions must return a mapping",
            context={"flow_name": flow_name, "index": index},
        )
        self.flow_name = flow_name
        self.index = index
        self.result = result

    def __repr__(self) -> str:
        return (
            f"ActionResultError(flow_name={self.flow_name!r}, "
            f"index={self.index}, result={self.result!r})"
        )


class CyclicFlowError(FlowsError):
    """A jump re-entered a flow already visited in the same execution.

    Attributes:
        trail: Visited flow names, ending with the flow that closed the cycle
    """

    def __init__(self, trail: list[str]):
        self.trail = list(trail)
        super().__init__(
            f"cyclic flow detected: {' -> '.join(self.trail)}",
            context={"trail": self.trail},
        )

    def __repr__(self) -> str:
        return f"CyclicFlowError(trail={self.trail!r})"


class DataCodecError(FlowsError, ValueError):
    """Data could not be encoded to (or decoded from) JSON."""


class InvalidDataError(FlowsError, TypeError):
    """Flow data is not a mapping."""


class InvalidControlError(FlowsError, TypeError):
    """The control envelope carries a field of the wrong type."""


class FlowLoadError(FlowsError, ImportError):
    """A flow module discovered on disk could not be loaded."""

    def __init__(self, message: str, path: str):
        super().__init__(message, context={"path": path})
        self.path = path
