"""Flow registry mapping flow names to their ordered actions."""

import logging
from collections.abc import Iterable

from pyflows.core.action import Action, ActionFn, as_action
from pyflows.core.errors import FlowNotFoundError

__all__ = ["FlowRegistry", "INIT_FLOW"]

INIT_FLOW = "init"


class FlowRegistry:
    """Registry mapping flow names to immutable action sequences.

    Re-registering a name replaces its flow, with one exception: when a
    flow keyed exactly ``"init"`` exists, registering any name containing
    ``"init"`` appends the new actions to it instead. This lets several
    modules contribute to start-up (``"init"``, ``"billing/init"``, ...).
    Note that the merge is by substring, so ``"reinitialize"`` also lands
    in ``"init"`` once ``"init"`` exists.

    Example:
        ```python
        registry = FlowRegistry()
        registry.register("init", [load_config, open_db])
        registry.register("plugins/init", [load_plugins])
        registry.get("init")  # (load_config, open_db, load_plugins) as Actions
        ```
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._flows: dict[str, tuple[Action, ...]] = {}
        self._logger = logger or logging.getLogger(__name__)

    def register(self, name: str, steps: Iterable[Action | ActionFn]) -> None:
        """Store steps under name, merging into ``"init"`` when applicable.

        Raises:
            TypeError: If name is not a string or a step is not callable
        """
        if not isinstance(name, str):
            raise TypeError(f"flow name must be a string, got {name!r}")

        actions = tuple(as_action(s) for s in steps)
        self._logger.debug(f"register {name}: {', '.join(a.name for a in actions)}")

        if INIT_FLOW in name and INIT_FLOW in self._flows:
            self._flows[INIT_FLOW] = self._flows[INIT_FLOW] + actions
            return

        self._flows[name] = actions

    def get(self, name: str) -> tuple[Action, ...] | None:
        return self._flows.get(name)

    def action_at(self, name: str, i: int) -> Action | None:
        """Return the action at (name, i), or None if there is none."""
        flow = self._flows.get(name)
        if flow is None or i < 0 or i >= len(flow):
            return None
        return flow[i]

    def get_action(self, name: str, i: int) -> Action:
        """Return the action at (name, i).

        Raises:
            FlowNotFoundError: If the flow or the index does not exist
        """
        if name not in self._flows:
            raise FlowNotFoundError(name)
        action = self.action_at(name, i)
        if action is None:
            raise FlowNotFoundError(name, i)
        return action

    def names(self) -> list[str]:
        return list(self._flows)

    def __contains__(self, name: object) -> bool:
        return name in self._flows

    def __len__(self) -> int:
        return len(self._flows)

    def __repr__(self) -> str:
        return f"FlowRegistry(flows={self.names()!r})"
