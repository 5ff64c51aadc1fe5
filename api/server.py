"""FastAPI WebSocket server driving a blockfall engine."""

import json
import os
import random
import asyncio
import logging
import time
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(level=os.getenv("BLOCKFALL_LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

from blockfall_core.commands import Command
from blockfall_core.engine import GameEngine, Phase, StepResult
from api.protocol import (
    PROTOCOL_VERSION,
    HelloRequest,
    HelloResponse,
    StartRequest,
    CommandRequest,
    TickRequest,
    SubscribeRequest,
    SubscribeAck,
    ObservationResponse,
    ErrorResponse,
    ErrorCode,
    parse_message,
    to_dict,
)

DEFAULT_FRAME_MS = float(os.getenv("BLOCKFALL_FRAME_MS", "16"))

app = FastAPI(title="Blockfall Core API", version="0.1.0")

# Enable CORS for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],  # Vite default ports
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GameSession:
    """Manages a single game session."""

    def __init__(self, websocket: WebSocket):
        self.engine: Optional[GameEngine] = None
        self.streaming = False
        self.frame_ms = DEFAULT_FRAME_MS
        self.driver_task: Optional[asyncio.Task] = None
        self.websocket = websocket

    @staticmethod
    def _observation(result: StepResult) -> ObservationResponse:
        return ObservationResponse(
            data=result.snapshot.to_dict(),
            accepted=result.accepted,
            events=result.events,
            lines_cleared=result.lines_cleared,
        )

    def start(self, seed: Optional[int] = None) -> ObservationResponse:
        """Start or restart the game.

        Args:
            seed: Random seed (generates one if None)

        Returns:
            Initial observation response
        """
        if seed is None:
            seed = random.randint(0, 1_000_000)

        if self.engine is None:
            self.engine = GameEngine(seed=seed)

        if self.engine.phase == Phase.PLAYING:
            # Restarting mid-game goes through the pause menu
            self.engine.command(Command.PAUSE)
        result = self.engine.start(seed)
        logger.info(f"[Session] Started game with seed={seed}")
        return self._observation(result)

    def command(self, name: str) -> ObservationResponse:
        """Apply a player command.

        Args:
            name: Command name

        Returns:
            Observation response after the command

        Raises:
            ValueError: If the command name is invalid
            RuntimeError: If no game was started
        """
        if self.engine is None:
            raise RuntimeError("Game not started. Send start first.")
        return self._observation(self.engine.command(Command.parse(name)))

    def tick(self, elapsed_ms: float) -> ObservationResponse:
        """Advance gravity by elapsed driver time.

        Raises:
            ValueError: If elapsed_ms is negative
            RuntimeError: If no game was started
        """
        if self.engine is None:
            raise RuntimeError("Game not started. Send start first.")
        if elapsed_ms < 0:
            raise ValueError(f"elapsed_ms must not be negative, got {elapsed_ms}")
        return self._observation(self.engine.tick(elapsed_ms))

    def stop_driver(self) -> None:
        """Stop the server-side tick loop."""
        self.streaming = False
        if self.driver_task and not self.driver_task.done():
            self.driver_task.cancel()

    def set_streaming(self, enabled: bool, frame_ms: Optional[float] = None) -> None:
        """Enable/disable the server-side tick loop.

        Args:
            enabled: Whether the server ticks the engine and streams observations
            frame_ms: Delay between ticks in milliseconds
        """
        self.stop_driver()
        if frame_ms is not None and frame_ms > 0:
            self.frame_ms = frame_ms
        self.streaming = enabled
        if enabled:
            self.driver_task = asyncio.create_task(self.run_driver())

    async def run_driver(self) -> None:
        """Tick the engine with measured elapsed time and push observations."""
        logger.info(f"[Driver] Starting: frame_ms={self.frame_ms}")
        try:
            last = time.monotonic()
            while self.streaming:
                await asyncio.sleep(self.frame_ms / 1000.0)
                now = time.monotonic()
                elapsed_ms = (now - last) * 1000.0
                last = now

                if self.engine is None:
                    continue

                result = self.engine.tick(elapsed_ms)
                # Every accepted tick is pushed; paused or finished games stay quiet
                if result.accepted:
                    await self.websocket.send_text(json.dumps(to_dict(self._observation(result))))

        except asyncio.CancelledError:
            logger.info("[Driver] Cancelled")
            self.streaming = False
            raise
        except Exception as e:
            logger.error(f"[Driver] Error: {e}", exc_info=True)
            self.streaming = False


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "blockfall-core-api", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


async def _send(websocket: WebSocket, message) -> None:
    await websocket.send_text(json.dumps(to_dict(message)))


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for game communication."""
    await websocket.accept()
    session = GameSession(websocket)
    logger.info("[WS] Client connected")

    try:
        while True:
            # Receive message
            data = await websocket.receive_text()

            try:
                message_dict = json.loads(data)
                message = parse_message(message_dict)

                # Handle different message types
                if isinstance(message, HelloRequest):
                    if message.version != PROTOCOL_VERSION:
                        await _send(websocket, ErrorResponse(
                            code=ErrorCode.VERSION_MISMATCH,
                            message=f"Server speaks {PROTOCOL_VERSION}, client sent {message.version}",
                        ))
                    else:
                        await _send(websocket, HelloResponse())

                elif isinstance(message, StartRequest):
                    await _send(websocket, session.start(message.seed))

                elif isinstance(message, CommandRequest):
                    try:
                        await _send(websocket, session.command(message.command))
                    except ValueError as e:
                        await _send(websocket, ErrorResponse(
                            code=ErrorCode.INVALID_COMMAND,
                            message=str(e),
                        ))
                    except RuntimeError as e:
                        await _send(websocket, ErrorResponse(
                            code=ErrorCode.GAME_NOT_STARTED,
                            message=str(e),
                        ))

                elif isinstance(message, TickRequest):
                    try:
                        await _send(websocket, session.tick(message.elapsed_ms))
                    except RuntimeError as e:
                        await _send(websocket, ErrorResponse(
                            code=ErrorCode.GAME_NOT_STARTED,
                            message=str(e),
                        ))

                elif isinstance(message, SubscribeRequest):
                    session.set_streaming(message.stream, message.frame_ms)
                    await _send(websocket, SubscribeAck(
                        streaming=session.streaming,
                        frame_ms=session.frame_ms,
                    ))

            except json.JSONDecodeError as e:
                await _send(websocket, ErrorResponse(
                    code=ErrorCode.INVALID_MESSAGE,
                    message=f"Invalid JSON: {str(e)}",
                ))

            except ValueError as e:
                await _send(websocket, ErrorResponse(
                    code=ErrorCode.INVALID_MESSAGE,
                    message=str(e),
                ))

    except WebSocketDisconnect:
        logger.info("[WS] Client disconnected")
    finally:
        session.stop_driver()


def main() -> None:
    import uvicorn

    uvicorn.run(
        app,
        host=os.getenv("BLOCKFALL_HOST", "0.0.0.0"),
        port=int(os.getenv("BLOCKFALL_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
