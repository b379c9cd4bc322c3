"""WebSocket telemetry for path tracking.

A TelemetryPublisher is registered on a Path as a tracking observer. Every
lookahead query enqueues a JSON frame; run() streams the frames to a
WebSocket server, reconnecting with exponential backoff.

Frame format:

    {"message_type": "tracking", "pose": {"x": .., "y": ..},
     "remaining_distance": .., "max_speed": .., "look_ahead_x": .., ...}
"""

import asyncio
import collections
import json
import logging
import threading
from typing import Deque

import websockets

from .config import (
    TERM_BLUE,
    TERM_RESET,
    WS_MAX_RETRY_DELAY_SECONDS,
    WS_POLL_INTERVAL_SECONDS,
    WS_QUEUE_SIZE,
    WS_RETRY_DELAY_SECONDS,
    WS_URI,
)
from .geometry import Point2D
from .path import DrivingData


def encode_frame(pose: Point2D, data: DrivingData) -> str:
    """Serialize one tracking sample as a JSON telemetry frame."""
    frame = {"message_type": "tracking", "pose": {"x": pose.x, "y": pose.y}}
    frame.update(data.to_dict())
    return json.dumps(frame)


class TelemetryPublisher:
    """Streams tracking frames to a WebSocket server.

    Calling the publisher (as a Path observer) only enqueues; frames are sent
    by the run() coroutine. The queue is bounded and drops the oldest frame
    when full, so a slow or absent server never stalls the control loop.

    Attributes:
        uri: WebSocket URI to connect to.
        should_stop: Set by stop(); run() returns once pending frames are sent.
        frames_sent: Number of frames delivered.
        frames_dropped: Number of frames discarded because the queue was full.
    """

    def __init__(
        self,
        uri: str = WS_URI,
        queue_size: int = WS_QUEUE_SIZE,
        retry_delay: float = WS_RETRY_DELAY_SECONDS,
        max_retry_delay: float = WS_MAX_RETRY_DELAY_SECONDS,
    ) -> None:
        """Initialize the publisher.

        Args:
            uri: WebSocket URI (must start with ws:// or wss://).
            queue_size: Maximum number of pending frames.
            retry_delay: Initial reconnect delay (seconds).
            max_retry_delay: Upper bound for the reconnect delay (seconds).

        Raises:
            ValueError: If URI format is invalid or queue_size is not positive.
        """
        if not uri or not uri.startswith(("ws://", "wss://")):
            raise ValueError(f"Invalid WebSocket URI: {uri}. Must start with 'ws://' or 'wss://'")
        if queue_size <= 0:
            raise ValueError(f"queue_size must be positive, got {queue_size}")

        self.uri: str = uri
        self.retry_delay = retry_delay
        self.max_retry_delay = max_retry_delay
        self.should_stop: bool = False
        self.frames_sent: int = 0
        self.frames_dropped: int = 0
        self._queue: Deque[str] = collections.deque(maxlen=queue_size)
        self._lock = threading.Lock()  # Observer runs on the simulation thread

    def __call__(self, pose: Point2D, data: DrivingData) -> None:
        frame = encode_frame(pose, data)
        with self._lock:
            if len(self._queue) == self._queue.maxlen:
                self.frames_dropped += 1
            self._queue.append(frame)

    def _take(self) -> str:
        with self._lock:
            return self._queue.popleft()

    def _requeue(self, frame: str) -> None:
        """Put an unsent frame back at the front; the newest frame goes if full."""
        with self._lock:
            if len(self._queue) == self._queue.maxlen:
                self.frames_dropped += 1
            self._queue.appendleft(frame)

    @property
    def pending(self) -> int:
        return len(self._queue)

    def stop(self) -> None:
        """Signal run() to finish after flushing pending frames."""
        self.should_stop = True

    async def _wait(self, seconds: float) -> None:
        """Sleep up to ``seconds``, returning early once stop() is called."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + seconds
        while not self.should_stop and loop.time() < deadline:
            await asyncio.sleep(WS_POLL_INTERVAL_SECONDS)

    async def run(self) -> None:
        """Connect and stream frames until stopped and drained.

        Connection failures are logged and retried with exponential backoff.
        If stop() has been called, a failed connection ends the run and the
        remaining frames are discarded.
        """
        retry_delay = self.retry_delay

        while not self.should_stop or self._queue:
            try:
                async with websockets.connect(self.uri) as websocket:
                    logging.info(f"{TERM_BLUE}✓ Connected to telemetry server {self.uri}{TERM_RESET}")
                    retry_delay = self.retry_delay

                    while not self.should_stop or self._queue:
                        if self._queue:
                            frame = self._take()
                            try:
                                await websocket.send(frame)
                            except Exception:
                                self._requeue(frame)
                                raise
                            self.frames_sent += 1
                        else:
                            await asyncio.sleep(WS_POLL_INTERVAL_SECONDS)

            except Exception as e:
                if self.should_stop:
                    logging.warning(f"Telemetry stopped with {len(self._queue)} unsent frame(s): {e}")
                    self._queue.clear()
                    break
                logging.error(f"Telemetry connection error: {e}")
                logging.info(f"Retrying in {retry_delay} seconds...")
                await self._wait(retry_delay)
                retry_delay = min(retry_delay * 2, self.max_retry_delay)

        logging.debug(f"Telemetry finished: {self.frames_sent} sent, {self.frames_dropped} dropped")
