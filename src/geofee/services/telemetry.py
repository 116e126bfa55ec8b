"""Best-effort usage telemetry for paid provider calls."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Protocol

from ..db.supabase import get_supabase_client

USAGE_TABLE = "user_activity_log"

logger = logging.getLogger(__name__)


class UsageSink(Protocol):
    def record(self, action: str, metadata: dict[str, Any]) -> None: ...


class LoggingUsageSink:
    """Writes usage events to the application log."""

    def record(self, action: str, metadata: dict[str, Any]) -> None:
        logger.info(f"Provider usage: {action} {metadata}")


class SupabaseUsageSink:
    """Inserts usage events into the Supabase activity log table.

    Events are skipped when Supabase is not configured.
    """

    def __init__(
        self,
        client_factory: Callable[[], Any] = get_supabase_client,
        table: str = USAGE_TABLE,
        user_id: Optional[str] = None,
    ) -> None:
        self._client_factory = client_factory
        self.table = table
        self.user_id = user_id

    def record(self, action: str, metadata: dict[str, Any]) -> None:
        client = self._client_factory()
        if client is None:
            return
        client.table(self.table).insert(
            {
                "user_id": self.user_id,
                "action_type": f"google_maps_{action}",
                "metadata": metadata,
            }
        ).execute()


def emit_usage(sink: Optional[UsageSink], action: str, metadata: dict[str, Any]) -> None:
    """Send a usage event, never letting a sink failure reach the caller."""
    if sink is None:
        return
    try:
        sink.record(action, metadata)
    except Exception as e:
        logger.warning(f"Failed to record '{action}' usage event: {e}")
