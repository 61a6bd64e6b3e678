"""Control envelope carried alongside flow data.

Flow data travels between actions as a plain mapping (the wire form). The
reserved key ``$$`` holds engine protocol rather than business payload:

- ``done``: stop the current flow without running further actions
- ``jump``: continue in another flow, starting from the current data
- ``i``: index to start at in the jumped-to flow (default 0)

Inside the engine the wire form is split into a Frame: the payload and a
typed Control. Only the boundaries (action input, action result, hook
events, the final output) see the wire form.

Example:
    ```python
    frame = Frame.from_data({"x": 1, "$$": {"jump": "billing", "i": 2}})
    frame.payload            # {"x": 1}
    frame.control.jump       # "billing"
    frame.control.start_index  # 2
    ```
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from pyflows.core.errors import InvalidControlError, InvalidDataError

__all__ = ["CONTROL_KEY", "Control", "Frame"]

CONTROL_KEY = "$$"

_FIELDS = ("done", "jump", "i")


@dataclass(frozen=True)
class Control:
    """Parsed control envelope.

    Unset fields are None so that to_data() reproduces exactly what the
    action wrote. Keys the engine does not know are kept in ``extra``.

    Attributes:
        done: Terminate the current flow
        jump: Name of the flow to continue in
        i: Starting index in the jumped-to flow
        extra: Unrecognized envelope keys, passed through untouched
    """

    done: bool | None = None
    jump: str | None = None
    i: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_data(cls, raw: Any) -> "Control":
        if not isinstance(raw, Mapping):
            raise InvalidControlError(
                f"{CONTROL_KEY} must be a mapping, got {type(raw).__name__}"
            )

        done = raw.get("done")
        if done is not None and not isinstance(done, bool):
            raise InvalidControlError(f"{CONTROL_KEY}.done must be a boolean, got {done!r}")

        jump = raw.get("jump")
        if jump is not None and not isinstance(jump, str):
            raise InvalidControlError(f"{CONTROL_KEY}.jump must be a flow name, got {jump!r}")

        i = raw.get("i")
        if i is not None and (isinstance(i, bool) or not isinstance(i, int) or i < 0):
            raise InvalidControlError(
                f"{CONTROL_KEY}.i must be a non-negative integer, got {i!r}"
            )

        extra = {k: v for k, v in raw.items() if k not in _FIELDS}
        return cls(done=done, jump=jump, i=i, extra=extra)

    def to_data(self) -> dict[str, Any]:
        data = dict(self.extra)
        if self.done is not None:
            data["done"] = self.done
        if self.jump is not None:
            data["jump"] = self.jump
        if self.i is not None:
            data["i"] = self.i
        return data

    @property
    def is_done(self) -> bool:
        return bool(self.done)

    @property
    def jump_target(self) -> str | None:
        """Flow to jump to, or None. An empty name is not a jump."""
        return self.jump or None

    @property
    def start_index(self) -> int:
        return self.i or 0

    def without_jump(self) -> "Control":
        return replace(self, jump=None)


@dataclass(frozen=True)
class Frame:
    """Flow data split into business payload and control envelope.

    ``control`` is None while the data has never carried an envelope.
    """

    payload: dict[str, Any]
    control: Control | None = None

    @classmethod
    def from_data(cls, data: Any) -> "Frame":
        if not isinstance(data, Mapping):
            raise InvalidDataError(f"flow data must be a mapping, got {type(data).__name__}")

        payload = {k: v for k, v in data.items() if k != CONTROL_KEY}
        raw = data.get(CONTROL_KEY)
        control = Control.from_data(raw) if raw is not None else None
        return cls(payload=payload, control=control)

    def to_data(self) -> dict[str, Any]:
        data = dict(self.payload)
        if self.control is not None:
            data[CONTROL_KEY] = self.control.to_data()
        return data

    def merge(self, result: Mapping[str, Any]) -> dict[str, Any]:
        """Overlay an action result on this frame's control envelope.

        Only the envelope is carried forward; the result's top-level fields
        make up the whole next payload, in the result's key order. A ``$$``
        key in the result replaces the envelope.

        Returns:
            Wire form of the next data
        """
        data = dict(result)
        if self.control is not None and CONTROL_KEY not in data:
            data[CONTROL_KEY] = self.control.to_data()
        return data

    def with_control(self, control: Control | None) -> "Frame":
        return replace(self, control=control)

    def ensure_control(self) -> "Frame":
        if self.control is not None:
            return self
        return self.with_control(Control())

    @property
    def is_done(self) -> bool:
        return self.control is not None and self.control.is_done

    @property
    def jump_target(self) -> str | None:
        return self.control.jump_target if self.control is not None else None
