"""Registries consulted by the engine.

- FlowRegistry: flow name → ordered actions
- HookRegistry: hook kind → ordered observers

Both are expected to be filled before the first execute() and are only
read while flows run.
"""

from pyflows.registry.flows import INIT_FLOW, FlowRegistry
from pyflows.registry.hooks import HookCallback, HookRegistry

__all__ = ["FlowRegistry", "HookRegistry", "HookCallback", "INIT_FLOW"]
