"""Look up execution engines registered under the ``compiletest.engines`` group."""

import logging
from importlib.metadata import EntryPoint, entry_points

from compiletest.engines.base import ExecutionEngine

log = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "compiletest.engines"


class EngineNotFoundError(Exception):
    """Raised when no engine is registered under the requested key."""


class InvalidEngineError(TypeError):
    """Raised when a registered entry point does not provide an engine."""


def available_engines() -> list[str]:
    """Return the sorted keys of every registered engine."""
    return sorted({entry.name for entry in entry_points(group=ENTRY_POINT_GROUP)})


def load_engine(key: str) -> ExecutionEngine:
    """Load the engine registered as ``key``.

    The entry point may name an engine instance or an engine class taking no
    arguments; classes are instantiated.

    Raises:
        EngineNotFoundError: If no engine is registered as ``key``
        InvalidEngineError: If the entry point is not an engine

    """
    matches = entry_points(group=ENTRY_POINT_GROUP, name=key)
    if not matches:
        raise EngineNotFoundError(
            f"No execution engine registered as '{key}'. "
            f"Known engines: {', '.join(available_engines()) or 'none'}"
        )
    return _engine_from_entry_point(next(iter(matches)))


def _engine_from_entry_point(entry: EntryPoint) -> ExecutionEngine:
    target = entry.load()
    if isinstance(target, type) and issubclass(target, ExecutionEngine):
        target = target()
    if not isinstance(target, ExecutionEngine):
        raise InvalidEngineError(
            f"Entry point '{entry.name}' ({entry.value}) is not an ExecutionEngine"
        )
    log.debug("Loaded engine %s from %s", entry.name, entry.value)
    return target
