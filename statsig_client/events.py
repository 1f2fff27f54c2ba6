"""
Event logger for custom events.
"""

import logging
import threading
from typing import Any, Dict, List, Optional

from statsig_client.config import DEFAULT_EVENT_BUFFER_SIZE
from statsig_client.models import Event
from statsig_client.retry import RetryPolicy
from statsig_client.transport import Transport

logger = logging.getLogger("statsig_client.events")

LOG_EVENT_ENDPOINT = "log_event"


class EventLogger:
    """
    Buffers events and sends them to the server in batches.

    Events are buffered in memory and flushed on a background thread when
    the buffer reaches max_buffer_size, and once more on shutdown. Flush
    failures are logged and the batch is dropped.
    """

    def __init__(
        self,
        transport: Transport,
        retry: RetryPolicy,
        environment: Optional[Dict[str, str]] = None,
        max_buffer_size: int = DEFAULT_EVENT_BUFFER_SIZE,
        enabled: bool = True,
    ):
        self._enabled = enabled
        self._transport = transport
        self._retry = retry
        self._environment = environment or None
        self._max_buffer_size = max(1, max_buffer_size)
        self._buffer: List[Dict[str, Any]] = []
        self._lock = threading.Lock()
        self._flush_threads: List[threading.Thread] = []

    def log(self, event: Event) -> None:
        """Add an event to the buffer."""
        if not self._enabled:
            return

        with self._lock:
            self._buffer.append(event.to_dict(self._environment))
            if len(self._buffer) < self._max_buffer_size:
                return
            batch = self._drain()
            thread = threading.Thread(
                target=self._send_quiet, args=(batch,), name="statsig-flush", daemon=True
            )
            self._flush_threads = [t for t in self._flush_threads if t.is_alive()]
            thread.start()
            self._flush_threads.append(thread)

    def log_immediate(self, events: List[Event]) -> Any:
        """
        Send events right away, bypassing the buffer.

        Returns:
            The decoded response body, None when logging is disabled

        Raises:
            StatsigError: When the request fails
        """
        if not self._enabled:
            logger.debug(f"Event logging disabled, dropping {len(events)} events")
            return None

        return self._transport.post_request(
            LOG_EVENT_ENDPOINT,
            self._payload([event.to_dict(self._environment) for event in events]),
        )

    def flush(self) -> None:
        """Send all buffered events, dropping them on failure."""
        with self._lock:
            batch = self._drain()
        self._send_quiet(batch)

    def shutdown(self) -> None:
        """Wait for background flushes and flush what is left."""
        with self._lock:
            threads = list(self._flush_threads)
            self._flush_threads = []
        for thread in threads:
            thread.join()
        self.flush()

    @property
    def buffer_size(self) -> int:
        """Get the current number of buffered events."""
        with self._lock:
            return len(self._buffer)

    def _drain(self) -> List[Dict[str, Any]]:
        batch = self._buffer
        self._buffer = []
        return batch

    def _payload(self, events: List[Dict[str, Any]]) -> Dict[str, Any]:
        return {
            "events": events,
            "statsigMetadata": self._transport.metadata.to_dict(),
        }

    def _send_quiet(self, batch: List[Dict[str, Any]]) -> None:
        """Send a batch without raising."""
        if not batch:
            return
        try:
            self._transport.send(LOG_EVENT_ENDPOINT, self._payload(batch), self._retry)
        except Exception as e:
            logger.warning(f"Dropping {len(batch)} events after failed flush: {e}")
