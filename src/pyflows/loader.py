"""Directory loader for flow modules.

Walks a directory tree and registers one flow per Python module. A module
contributes its ``steps`` attribute, and its flow name is its path relative
to the root, with POSIX separators and the final suffix removed:

    flows/
        init.py             -> "init"
        billing/
            init.py         -> "billing/init"  (merged into "init")
            charge.py       -> "billing/charge"

Directories are recursed into, never registered themselves. Within a
directory, modules are visited in sorted order before its subdirectories,
so a top-level ``init.py`` is registered before nested ones merge into it. Files
starting with ``_`` or ``.`` (``__init__.py``, ``_helpers.py``) are skipped.

The engine never calls this module; it only sees the resulting
name → steps mapping through register().
"""

import importlib.util
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Protocol

from pyflows.core.errors import FlowLoadError

logger = logging.getLogger(__name__)

__all__ = ["STEPS_ATTRIBUTE", "discover", "register_directory"]

STEPS_ATTRIBUTE = "steps"


class _Registrar(Protocol):
    def register(self, name: str, steps: Sequence[Callable[..., Any]]) -> None: ...


def _module_files(root: Path) -> list[Path]:
    entries = [e for e in sorted(root.iterdir()) if not e.name.startswith((".", "_"))]
    files = [e for e in entries if e.is_file() and e.suffix == ".py"]
    for directory in (e for e in entries if e.is_dir()):
        files.extend(_module_files(directory))
    return files


def _flow_name(root: Path, path: Path) -> str:
    return path.relative_to(root).with_suffix("").as_posix()


def _load_steps(path: Path, name: str) -> list[Callable[..., Any]]:
    module_name = f"pyflows_loaded.{name.replace('/', '.')}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise FlowLoadError(f"cannot import flow module {path}", str(path))

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        raise FlowLoadError(f"failed to import flow module {path}: {e}", str(path)) from e

    steps = getattr(module, STEPS_ATTRIBUTE, None)
    if steps is None:
        raise FlowLoadError(f"flow module {path} defines no '{STEPS_ATTRIBUTE}'", str(path))
    if isinstance(steps, (str, bytes)) or not isinstance(steps, Sequence):
        raise FlowLoadError(
            f"'{STEPS_ATTRIBUTE}' in {path} must be a list of callables", str(path)
        )
    return list(steps)


def discover(folder: str | Path) -> dict[str, list[Callable[..., Any]]]:
    """Import every flow module under folder.

    Returns:
        Flow name → steps, in sorted path order

    Raises:
        FlowLoadError: If a module fails to import or has no usable steps
        NotADirectoryError: If folder is not a directory
    """
    root = Path(folder)
    if not root.is_dir():
        raise NotADirectoryError(f"{root} is not a directory")

    discovered: dict[str, list[Callable[..., Any]]] = {}
    for path in _module_files(root):
        name = _flow_name(root, path)
        discovered[name] = _load_steps(path, name)
        logger.debug(f"Discovered flow {name} ({len(discovered[name])} steps) in {path}")
    return discovered


def register_directory(flows: _Registrar, folder: str | Path) -> list[str]:
    """Register every flow module under folder on flows.

    Returns:
        Registered names, in registration order
    """
    discovered = discover(folder)
    for name, steps in discovered.items():
        flows.register(name, steps)
    logger.info(f"Registered {len(discovered)} flows from {folder}")
    return list(discovered)
