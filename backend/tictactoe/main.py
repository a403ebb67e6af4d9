"""
Tic-tac-toe API и WebSocket.
"""
import logging

import uvicorn
from fastapi import FastAPI, Request, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .session import MatchSession
from .ws_handlers import ws_client_loop

config = get_config()

logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app(session: MatchSession | None = None) -> FastAPI:
    app = FastAPI(title="Tic-tac-toe API")
    app.state.session = session or MatchSession(
        first_move_timeout=config.first_move_timeout_seconds,
        move_timeout=config.move_timeout_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/stats")
    async def stats(request: Request):
        return request.app.state.session.stats()

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_client_loop(ws, ws.app.state.session)

    return app


app = create_app()


def run() -> None:
    logger.info("Listening on %s:%s", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    run()
