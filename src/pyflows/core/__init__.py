"""
Core types for pyflows.

This module contains the fundamental types used throughout pyflows:
- Action: A single flow step (FunctionAction / CoroutineAction)
- Control, Frame: Control envelope and the data it travels with
- JsonCodec: Canonical deep-copy codec
- HookKind: Lifecycle transition points
- *Event: Hook payloads
- FlowsError and subclasses
"""

from pyflows.core.action import Action, CoroutineAction, FunctionAction, action, as_action
from pyflows.core.codec import DEFAULT_CODEC, JsonCodec, deep_copy
from pyflows.core.control import CONTROL_KEY, Control, Frame
from pyflows.core.errors import (
    ActionResultError,
    CyclicFlowError,
    DataCodecError,
    FlowLoadError,
    FlowNotFoundError,
    FlowsError,
    InvalidControlError,
    InvalidDataError,
    UnknownHookError,
)
from pyflows.core.events import (
    ActionEvent,
    ExceptionEvent,
    FlowEvent,
    PostActionEvent,
    PostFlowEvent,
    PreActionEvent,
    PreFlowEvent,
)
from pyflows.core.hook_kind import HookKind

__all__ = [
    "Action",
    "FunctionAction",
    "CoroutineAction",
    "action",
    "as_action",
    "JsonCodec",
    "DEFAULT_CODEC",
    "deep_copy",
    "CONTROL_KEY",
    "Control",
    "Frame",
    "HookKind",
    "FlowEvent",
    "ActionEvent",
    "PreFlowEvent",
    "PostFlowEvent",
    "PreActionEvent",
    "PostActionEvent",
    "ExceptionEvent",
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
