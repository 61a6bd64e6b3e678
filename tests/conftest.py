"""
Pytest configuration and fixtures for pyflows tests.

Provides a fresh Flows instance, a hook recorder, reusable test actions
and Hypothesis strategies for JSON-like data.
"""

import asyncio

import pytest
from hypothesis import strategies as st

from pyflows import Flows, HookKind


class HookRecorder:
    """Records every hook event fired on a Flows instance, in order."""

    def __init__(self, flows: Flows):
        self.events = []
        for kind in HookKind:
            flows.hook(kind, self.events.append)

    @property
    def kinds(self) -> list[HookKind]:
        return [event.kind for event in self.events]

    def of(self, kind: HookKind) -> list:
        return [event for event in self.events if event.kind is kind]

    def trace(self) -> list[str]:
        """Compact trace like ["PRE_FLOW", "PRE_ACTION(a#0)", ...]."""
        out = []
        for event in self.events:
            if hasattr(event, "i"):
                out.append(f"{event.kind}({event.flow_name}#{event.i})")
            else:
                out.append(f"{event.kind}({event.flow_name})")
        return out


@pytest.fixture
def flows() -> Flows:
    """Fresh Flows instance."""
    return Flows()


@pytest.fixture
def recorder(flows: Flows) -> HookRecorder:
    """Hook recorder attached to the flows fixture."""
    return HookRecorder(flows)


# Reusable actions


def add(key: str, value):
    """Action that returns the input with key set to value."""

    def _add(data, context):
        return {**data, key: value}

    _add.__qualname__ = f"add_{key}"
    return _add


def append(tag: str):
    """Action that appends tag to data["seen"]."""

    async def _append(data, context):
        await asyncio.sleep(0)
        return {**data, "seen": data.get("seen", []) + [tag]}

    _append.__qualname__ = f"append_{tag}"
    return _append


def control(**flags):
    """Action that keeps the payload and sets the given $$ flags."""

    def _control(data, context):
        return {**data, "$$": {**data.get("$$", {}), **flags}}

    return _control


# Hypothesis strategies for property-based testing

json_scalars = (
    st.none()
    | st.booleans()
    | st.integers(min_value=-(2**53), max_value=2**53)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(max_size=20)
)

json_values = st.recursive(
    json_scalars,
    lambda children: st.lists(children, max_size=5)
    | st.dictionaries(st.text(max_size=10), children, max_size=5),
    max_leaves=25,
)

json_objects = st.dictionaries(
    st.text(max_size=10).filter(lambda k: k != "$$"), json_values, max_size=6
)
