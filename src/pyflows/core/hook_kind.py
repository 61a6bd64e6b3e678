"""Hook kinds for flow lifecycle observers."""

from enum import Enum

from pyflows.core.errors import UnknownHookError


class HookKind(Enum):
    """
    Transition points an observer can subscribe to.

    Order of firing for a two-action flow:
    PRE_FLOW → PRE_ACTION(0) → POST_ACTION(0) → PRE_ACTION(1) → POST_ACTION(1) → POST_FLOW

    EXCEPTION replaces POST_ACTION when an action fails.
    """

    PRE_ACTION = "PRE_ACTION"
    """Before an action is invoked."""

    POST_ACTION = "POST_ACTION"
    """After an action result has been merged."""

    PRE_FLOW = "PRE_FLOW"
    """Once per execute(), before the first action."""

    POST_FLOW = "POST_FLOW"
    """Once per execute(), when the (last jumped-to) flow terminates."""

    EXCEPTION = "EXCEPTION"
    """An action raised or returned an invalid result."""

    @classmethod
    def parse(cls, kind: "HookKind | str") -> "HookKind":
        """Resolve a member or its name.

        Raises:
            UnknownHookError: If kind names no hook
        """
        if isinstance(kind, cls):
            return kind
        if isinstance(kind, str):
            try:
                return cls[kind]
            except KeyError:
                pass
        raise UnknownHookError(kind)

    def __str__(self) -> str:
        return self.value
