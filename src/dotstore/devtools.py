"""Debug bridge — mirror store transitions into an external inspector. Opt-in.

dotstore does not ship a connection to any particular tool. Install a
connector once, at startup:

    dotstore.devtools.set_connector(my_connect)

my_connect(name, features) must return an object implementing
DevToolsConnection (or None to decline). Stores built with devtools="name"
then report every mutation and accept jump/reset instructions back.

Instructions that cannot be decoded are logged and dropped; the store is
left untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Callable, Protocol

from dotstore._locate import MISSING
from dotstore.errors import MalformedInstructionError

logger = logging.getLogger("dotstore.devtools")

FEATURES = {
    "jump": True,
    "skip": True,
    "reorder": True,
    "dispatch": True,
    "persist": True,
}

JUMP_TYPES = frozenset({"JUMP_TO_ACTION", "JUMP_TO_STATE"})


class DevToolsConnection(Protocol):
    def init(self, state: Any) -> None: ...

    def send(self, action: dict, state: Any) -> None: ...

    def subscribe(self, listener: Callable[[Any], None]) -> object: ...


Connector = Callable[[str, dict], "DevToolsConnection | None"]

_connector: Connector | None = None


def set_connector(connector: Connector | None) -> None:
    """Install (or with None, remove) the process-wide connection factory."""
    global _connector
    _connector = connector


def connect(name: str) -> DevToolsConnection | None:
    """Open a connection named name, or None if no connector is installed."""
    if _connector is None:
        logger.debug("No devtools connector installed; %r not connected", name)
        return None
    connection = _connector(name, dict(FEATURES))
    if connection is not None:
        logger.info("Connected store %r to devtools", name)
    return connection


def decode(raw: Any, what: str) -> Any:
    """Decode a JSON payload, raising MalformedInstructionError on failure."""
    if not isinstance(raw, (str, bytes, bytearray)):
        raise MalformedInstructionError(f"{what} is not a JSON string", raw=raw)
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise MalformedInstructionError(f"{what} is not valid JSON: {exc}", raw=raw) from exc


class DevToolsBridge:
    """Owns one connection on behalf of one store.

    The store hands over its current state with every report, and is driven
    back through on_replace (jump to a state) and on_reset.
    """

    __slots__ = ("_connection", "_on_replace", "_on_reset", "_paused")

    def __init__(
        self,
        connection: DevToolsConnection,
        state: Any,
        *,
        on_replace: Callable[[dict], None],
        on_reset: Callable[[], None],
    ) -> None:
        self._connection = connection
        self._on_replace = on_replace
        self._on_reset = on_reset
        self._paused = False
        connection.init(state)
        connection.subscribe(self.handle_message)

    @property
    def paused(self) -> bool:
        return self._paused

    def send(self, action: str, state: Any, path: str = "", value: Any = MISSING) -> None:
        """Report one mutation. Suppressed while applying an incoming state."""
        if self._paused:
            return
        payload: dict[str, Any] = {"type": f"{action} {path}" if path else action, "path": path}
        if value is not MISSING:
            payload["value"] = value
        self._connection.send(payload, state)

    def handle_message(self, message: Any) -> None:
        """Entry point for instructions pushed by the inspector."""
        if not isinstance(message, Mapping):
            logger.warning("Ignoring malformed devtools message: %r", message)
            return
        kind = message.get("type")
        if kind == "DISPATCH":
            payload = message.get("payload")
            payload_type = payload.get("type") if isinstance(payload, Mapping) else None
            if payload_type in JUMP_TYPES:
                try:
                    state = decode(message.get("state"), "jump state")
                    if not isinstance(state, dict):
                        raise MalformedInstructionError("jump state is not an object", raw=state)
                except MalformedInstructionError:
                    logger.exception("Failed to parse jump state")
                    return
                self.apply_state(state)
            elif payload_type == "RESET":
                self._on_reset()
            else:
                logger.debug("Ignoring devtools dispatch %r", payload_type)
        elif kind == "ACTION":
            try:
                action = decode(message.get("payload"), "action")
            except MalformedInstructionError:
                logger.exception("Failed to parse action")
                return
            logger.debug("Ignoring devtools action %r", action)

    def apply_state(self, state: dict) -> None:
        """Replace the store state without echoing it back to the inspector."""
        self._paused = True
        try:
            self._on_replace(state)
        finally:
            self._paused = False
