"""FastAPI WebSocket server for the Tetrisiyum engine."""

import json
import random
import logging
import argparse
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from tetrisiyum.engine import GameEngine, Snapshot
from tetrisiyum.scheduler import GameScheduler
from tetrisiyum.state import Command
from api.protocol import (
    HelloRequest,
    HelloResponse,
    StartRequest,
    CommandRequest,
    StopRequest,
    StoppedResponse,
    SnapshotResponse,
    ErrorResponse,
    ErrorCode,
    parse_message,
    to_dict,
)

app = FastAPI(title="Tetrisiyum API", version="0.1.0")

# Enable CORS for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173", "http://localhost:8081"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class GameSession:
    """Manages a single game session and its periodic drivers."""

    def __init__(self, websocket: WebSocket):
        self.engine = GameEngine()
        self.scheduler: Optional[GameScheduler] = None
        self.websocket = websocket

    async def send(self, message) -> None:
        await self.websocket.send_text(json.dumps(to_dict(message)))

    async def push_snapshot(self, event: str, snapshot: Snapshot) -> None:
        """Send a snapshot to the client."""
        await self.send(SnapshotResponse(data=snapshot.to_dict(), event=event))

    def start(self, seed: Optional[int] = None, playback_speed: float = 1.0) -> SnapshotResponse:
        """Start a new game and its drivers.

        Args:
            seed: Random seed (generates one if None)
            playback_speed: Time multiplier for the drivers

        Returns:
            Snapshot response for the fresh game
        """
        if seed is None:
            seed = random.randint(0, 1_000_000)

        scheduler = GameScheduler(
            self.engine, on_update=self.push_snapshot, playback_speed=playback_speed
        )
        if self.scheduler is not None:
            self.scheduler.close()
        self.scheduler = scheduler

        self.engine.spawner.reset(seed)
        self.engine.start()
        self.scheduler.start()
        logger.info(f"[Session] Game started: seed={seed}, playback={playback_speed}x")

        return SnapshotResponse(data=self.engine.get_snapshot().to_dict(), event="start")

    def command(self, name: str) -> SnapshotResponse:
        """Apply a gameplay command.

        Args:
            name: Command name

        Returns:
            Snapshot response after the command

        Raises:
            ValueError: If the command is unknown
        """
        if name == Command.START:
            return self.start()
        self.engine.command(name)
        return SnapshotResponse(data=self.engine.get_snapshot().to_dict(), event=name)

    def stop(self) -> None:
        """Stop the periodic drivers."""
        if self.scheduler is not None:
            self.scheduler.close()
            self.scheduler = None


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "tetrisiyum-api", "version": "0.1.0"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """WebSocket endpoint for game communication."""
    await websocket.accept()
    session = GameSession(websocket)

    try:
        while True:
            # Receive message
            data = await websocket.receive_text()

            try:
                message = parse_message(json.loads(data))

                # Handle different message types
                if isinstance(message, HelloRequest):
                    await session.send(HelloResponse())

                elif isinstance(message, StartRequest):
                    logger.info(f"[WS] Received start request: seed={message.seed}")
                    try:
                        await session.send(session.start(message.seed, message.playback_speed))
                    except Exception as e:
                        logger.error(f"[WS] Start failed: {e}", exc_info=True)
                        await session.send(ErrorResponse(code=ErrorCode.INVALID_MESSAGE, message=f"Start error: {str(e)}"))

                elif isinstance(message, CommandRequest):
                    try:
                        await session.send(session.command(message.command))
                    except ValueError as e:
                        await session.send(ErrorResponse(code=ErrorCode.INVALID_COMMAND, message=str(e)))
                    except Exception as e:
                        logger.error(f"[WS] Command failed: {e}", exc_info=True)
                        await session.send(ErrorResponse(code=ErrorCode.INVALID_COMMAND, message=f"Command error: {str(e)}"))

                elif isinstance(message, StopRequest):
                    logger.info(f"[WS] Received stop request")
                    session.stop()
                    await session.send(StoppedResponse())

            except json.JSONDecodeError as e:
                await session.send(ErrorResponse(code=ErrorCode.INVALID_MESSAGE, message=f"Invalid JSON: {str(e)}"))

            except ValueError as e:
                await session.send(ErrorResponse(code=ErrorCode.INVALID_MESSAGE, message=str(e)))

    except WebSocketDisconnect:
        logger.info("[WS] Client disconnected")
    finally:
        session.stop()


def main():
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the Tetrisiyum WebSocket server")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
