"""
pyflows: named, step-sequenced workflow execution.

Register ordered lists of actions under flow names, then execute a flow by
name with an initial payload. Each action receives the accumulated data and
returns the next data; the ``$$`` envelope lets an action stop the flow
(``done``) or continue in another one (``jump``, ``i``). Hooks observe every
transition.

Example:
    ```python
    import asyncio
    from pyflows import Flows, HookKind

    flows = Flows()

    async def greet(data, context):
        return {**data, "greeting": f"Hello {data['name']}"}

    def shout(data, context):
        return {**data, "greeting": data["greeting"].upper()}

    flows.register("greet", [greet, shout])
    flows.hook(HookKind.POST_ACTION, lambda event: print(event.i, event.output))

    output = asyncio.run(flows.execute("greet", {"name": "Ada"}))
    # {"name": "Ada", "greeting": "HELLO ADA", "$$": {}}
    ```
"""

from pyflows.core import (
    CONTROL_KEY,
    Action,
    ActionEvent,
    ActionResultError,
    Control,
    CoroutineAction,
    CyclicFlowError,
    DataCodecError,
    ExceptionEvent,
    FlowEvent,
    FlowLoadError,
    FlowNotFoundError,
    FlowsError,
    FunctionAction,
    HookKind,
    InvalidControlError,
    InvalidDataError,
    JsonCodec,
    PostActionEvent,
    PostFlowEvent,
    PreActionEvent,
    PreFlowEvent,
    UnknownHookError,
    action,
    as_action,
    deep_copy,
)
from pyflows.executor import Flows, execute_flow
from pyflows.registry import FlowRegistry, HookRegistry

# Version
__version__ = "0.1.0"

__all__ = [
    # Facade
    "Flows",
    "execute_flow",
    # Registries
    "FlowRegistry",
    "HookRegistry",
    # Actions
    "Action",
    "FunctionAction",
    "CoroutineAction",
    "action",
    "as_action",
    # Data
    "CONTROL_KEY",
    "Control",
    "JsonCodec",
    "deep_copy",
    # Hooks
    "HookKind",
    "FlowEvent",
    "ActionEvent",
    "PreFlowEvent",
    "PostFlowEvent",
    "PreActionEvent",
    "PostActionEvent",
    "ExceptionEvent",
    # Errors
    "FlowsError",
    "UnknownHookError",
    "FlowNotFoundError",
    "ActionResultError",
    "CyclicFlowError",
    "DataCodecError",
    "InvalidDataError",
    "InvalidControlError",
    "FlowLoadError",
    # Metadata
    "__version__",
]
