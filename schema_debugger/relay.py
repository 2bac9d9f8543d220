"""Session-scoped relay of debug results from a page session to a panel."""

import logging
import time
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from schema_debugger.config import DebugOptions
from schema_debugger.debugger import debug
from schema_debugger.errors import RelayError
from schema_debugger.schemas import DebugResult

logger = logging.getLogger(__name__)

VALIDATION_DATA = "VALIDATION_DATA"

Subscriber = Callable[["RelayRecord"], Any]


def _now_ms() -> int:
    return int(time.time() * 1000)


class RelayRecord(BaseModel):
    """A registered validation as forwarded to the panel."""

    id: str
    schema_: Any = Field(None, alias="schema")
    values: Any = None
    result: Any = None
    timestamp: int = Field(default_factory=_now_ms)

    model_config = ConfigDict(populate_by_name=True)


class PanelRegistry:
    """
    Panel connections keyed by session id.

    A port is any object with a callable ``post_message(message)``.
    """

    def __init__(self) -> None:
        self._ports: dict[str, Any] = {}

    def connect(self, session_id: str, port: Any) -> None:
        if not callable(getattr(port, "post_message", None)):
            raise RelayError(f"Port for session '{session_id}' has no post_message")
        if session_id in self._ports:
            logger.info("Replacing panel connection for session %s", session_id)
        self._ports[session_id] = port
        logger.info("Panel connected for session: %s", session_id)

    def disconnect(self, session_id: str) -> None:
        if self._ports.pop(session_id, None) is not None:
            logger.info("Panel disconnected for session: %s", session_id)

    def is_connected(self, session_id: str) -> bool:
        return session_id in self._ports

    def forward(self, session_id: str, record: RelayRecord) -> bool:
        """
        Post a record to the session's panel.

        Args:
            session_id: Session that produced the record.
            record: The registered validation.

        Returns:
            bool: False when no panel is connected for the session.
        """
        port = self._ports.get(session_id)
        if port is None:
            logger.debug("No panel for session %s; dropping record", session_id)
            return False
        port.post_message(
            {"type": VALIDATION_DATA, "data": record.model_dump(by_alias=True)}
        )
        return True


class DebugSession:
    """Validation history and subscribers for one page session."""

    def __init__(self, session_id: str, registry: PanelRegistry) -> None:
        self.session_id = session_id
        self.registry = registry
        self._validations: list[RelayRecord] = []
        self._subscribers: list[Subscriber] = []

    def register_validation(
        self, id: str, schema: Any, values: Any, result: Any
    ) -> RelayRecord:
        """Record a validation, notify subscribers and forward it to the panel."""
        record = RelayRecord(id=id, schema=schema, values=values, result=result)
        self._validations.append(record)

        for callback in list(self._subscribers):
            try:
                callback(record)
            except Exception:
                logger.exception("Error in debug subscriber")

        self.registry.forward(self.session_id, record)
        return record

    def debug_and_register(
        self,
        id: str,
        schema: Any,
        values: Any,
        options: DebugOptions | None = None,
    ) -> DebugResult:
        """Run ``debug`` and register its result under ``id``."""
        result = debug(schema, values, options)
        self.register_validation(id, repr(schema), values, result)
        return result

    def subscribe(self, callback: Subscriber) -> None:
        """Add a subscriber and replay the existing history to it."""
        if not callable(callback):
            raise RelayError("Subscriber must be callable")
        self._subscribers.append(callback)
        for record in list(self._validations):
            callback(record)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def get_validations(self) -> list[RelayRecord]:
        return list(self._validations)
