"""WebSocket streaming server for connection and highlight frames.

Pushes render frames (connection paths, draft preview, highlight state) to
browser viewers so the canvas can be redrawn remotely, and accepts a small
set of commands back from them.

Client messages:
- {"type": "ping"} - keep-alive, answered with "pong"
- {"type": "animate", "node_id": "..."} - start a highlight animation
- {"type": "stop_animation"} - clear any running highlight

Usage:
    async with StreamManager(editor.frame, editor.sequencer) as stream:
        await stream.send_frame()
"""

import asyncio
import json
import logging
import time
from typing import Any, Callable, Dict, Optional, Set

import websockets
from websockets.exceptions import ConnectionClosed

from ..animation.sequencer import AnimationSequencer, HighlightState
from .paths import RenderFrame

logger = logging.getLogger(__name__)

FrameSource = Callable[[], RenderFrame]


class HighlightStreamServer:
    """WebSocket server broadcasting render frames to all viewers."""

    def __init__(
        self,
        frame_source: FrameSource,
        sequencer: Optional[AnimationSequencer] = None,
        host: str = "localhost",
        port: int = 8765,
        max_fps: float = 30.0,
    ):
        """Initialize streaming server.

        Args:
            frame_source: Callable producing the current RenderFrame
            sequencer: Animation sequencer driven by client commands
            host: Server host address
            port: Server port
            max_fps: Maximum frame rate for non-forced broadcasts
        """
        self.frame_source = frame_source
        self.sequencer = sequencer
        self.host = host
        self.port = port
        self.max_fps = max_fps
        self.min_frame_interval = 1.0 / max_fps

        self.clients: Set[Any] = set()
        self.server = None

        self.frames_sent = 0
        self.bytes_sent = 0
        self.last_frame_time = 0.0
        self.start_time = 0.0

        self._pending_tasks: Set[asyncio.Task] = set()
        self._unsubscribe = None
        if sequencer is not None:
            self._unsubscribe = sequencer.subscribe(self._on_highlight_changed)

    async def start(self):
        """Start the WebSocket server."""
        self.start_time = time.time()
        self.server = await websockets.serve(
            self._handle_client,
            self.host,
            self.port,
            ping_interval=20,
            ping_timeout=10,
        )
        logger.info(f"Highlight stream started on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the server and disconnect all clients."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
            logger.info("Highlight stream stopped")

        if self.clients:
            await asyncio.gather(
                *[client.close() for client in self.clients],
                return_exceptions=True,
            )
            self.clients.clear()

    async def _handle_client(self, websocket):
        self.clients.add(websocket)
        client_addr = getattr(websocket, "remote_address", None)
        logger.info(f"Viewer connected: {client_addr}")

        try:
            await websocket.send(json.dumps({
                "type": "welcome",
                "fps": self.max_fps,
                "animation": self.sequencer is not None,
            }))
            await websocket.send(self._frame_message(time.time()))

            async for message in websocket:
                try:
                    data = json.loads(message)
                except json.JSONDecodeError:
                    logger.warning(f"Invalid JSON from {client_addr}: {message}")
                    continue
                if not isinstance(data, dict):
                    logger.warning(f"Ignoring non-object message from {client_addr}")
                    continue
                await self._handle_client_message(websocket, data)

        except ConnectionClosed:
            logger.info(f"Viewer disconnected: {client_addr}")
        finally:
            self.clients.discard(websocket)

    async def _handle_client_message(self, websocket, data: Dict[str, Any]):
        msg_type = data.get("type")

        if msg_type == "ping":
            await websocket.send(json.dumps({"type": "pong"}))

        elif msg_type == "animate":
            node_id = data.get("node_id")
            if self.sequencer is None or not node_id:
                await self._send_status(websocket, "warning", "Animation unavailable")
                return
            # Frames for highlight changes go out through _on_highlight_changed.
            sequence = self.sequencer.start(str(node_id))
            if sequence is None:
                await self._send_status(websocket, "warning", f"Cannot animate {node_id}")

        elif msg_type == "stop_animation":
            if self.sequencer is not None:
                self.sequencer.stop()

        else:
            logger.warning(f"Unknown message type: {msg_type}")

    async def _send_status(self, websocket, status: str, message: str):
        await websocket.send(json.dumps({
            "type": "status",
            "status": status,
            "message": message,
        }))

    def _frame_message(self, timestamp: float) -> str:
        return json.dumps({
            "type": "frame",
            "data": self.frame_source().to_dict(),
            "timestamp": timestamp,
        })

    def _on_highlight_changed(self, state: HighlightState):
        # Sequencer callbacks are synchronous; push the frame from the loop.
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.broadcast_frame(force=True))
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)

    async def broadcast_frame(self, force: bool = False):
        """Broadcast the current frame to every viewer.

        Non-forced frames are dropped when they arrive faster than max_fps.
        """
        if not self.clients:
            return

        current_time = time.time()
        if not force and current_time - self.last_frame_time < self.min_frame_interval:
            return
        self.last_frame_time = current_time

        message = self._frame_message(current_time)
        await self._broadcast(message)
        self.frames_sent += 1
        self.bytes_sent += len(message)

    async def broadcast_status(self, status: str, message: str = ""):
        """Broadcast a status message ("info", "warning", "error")."""
        await self._broadcast(json.dumps({
            "type": "status",
            "status": status,
            "message": message,
        }))

    async def _broadcast(self, message: str):
        if not self.clients:
            return

        disconnected = set()
        for client in list(self.clients):
            try:
                await client.send(message)
            except ConnectionClosed:
                disconnected.add(client)
        self.clients -= disconnected

    def get_stats(self) -> Dict[str, Any]:
        uptime = time.time() - self.start_time if self.start_time else 0
        return {
            "clients_connected": len(self.clients),
            "frames_sent": self.frames_sent,
            "bytes_sent": self.bytes_sent,
            "uptime_seconds": uptime,
        }


class StreamManager:
    """Async context manager for the highlight stream lifecycle."""

    def __init__(
        self,
        frame_source: FrameSource,
        sequencer: Optional[AnimationSequencer] = None,
        host: str = "localhost",
        port: int = 8765,
        max_fps: float = 30.0,
    ):
        self.server = HighlightStreamServer(frame_source, sequencer, host, port, max_fps)
        self.url = f"ws://{host}:{port}"

    async def __aenter__(self):
        await self.server.start()
        logger.info(f"Connection viewer available at {self.url}")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.server.stop()

    async def send_frame(self, force: bool = False):
        await self.server.broadcast_frame(force=force)

    async def send_status(self, status: str, message: str = ""):
        await self.server.broadcast_status(status, message)

    def get_viewer_url(self) -> str:
        return self.url

    def get_stats(self) -> Dict[str, Any]:
        return self.server.get_stats()
