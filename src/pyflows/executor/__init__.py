"""
Executor module - runtime for registered flows.

- engine: the step-advancement loop (Engine)
- instance: the registration/execution facade (Flows)
"""

from pyflows.executor.engine import Engine, activate
from pyflows.executor.instance import Flows, execute_flow

__all__ = [
    "Engine",
    "activate",
    "Flows",
    "execute_flow",
]
