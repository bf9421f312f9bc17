import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, StreamingResponse

from .config import DEBUG_API_SECRET, HTTP_HOST, HTTP_PORT
from .server import GameServer
from .tcp import TcpServer
from .logger import get_logger, get_current_log_file_path
from .logtail import sse_event, stream_events

logger = get_logger("main")

# Instâncias globais (servidor de jogo + listener TCP)
game_server = GameServer()
tcp_server = TcpServer(game_server)


@asynccontextmanager
async def lifespan(app):
    # Startup
    await tcp_server.start()
    await game_server.reaper.start()
    logger.info("Idle reaper started")

    yield

    # Shutdown
    await game_server.reaper.stop()
    await tcp_server.stop()
    logger.info("Shutdown complete")


app = FastAPI(title="Game Server Monitor", lifespan=lifespan)


def _check_debug_auth(request: Request) -> bool:
    """Verifica se o request tem autorização para acessar endpoints de debug.
    Se DEBUG_API_SECRET estiver vazio, permite acesso (dev mode)."""
    if not DEBUG_API_SECRET:
        return True
    return request.headers.get("X-Debug-Secret") == DEBUG_API_SECRET


# ============================================================================
# MONITORAMENTO - somente leitura sobre o registro de sessões
# ============================================================================

@app.get("/api/players/count")
def players_count():
    return {"count": game_server.registry.count()}


@app.get("/api/players")
def players():
    return game_server.registry.presence()["players"]


@app.get("/api/status")
def status():
    return {"status": "online", "players": game_server.registry.count()}


# Rotas antigas (compatibilidade)
@app.get("/players")
def players_legacy():
    return game_server.registry.presence()["players"]


@app.get("/status")
def status_legacy():
    return {
        "onlinePlayers": game_server.registry.count(),
        "serverTime": int(time.time() * 1000),
        "status": "running",
    }


@app.get("/health")
def health_check():
    """Health check público (Docker HEALTHCHECK e monitores)"""
    return {"status": "ok", "players": game_server.registry.count()}


# ============================================================================
# LOG VIEWER
# ============================================================================

@app.get("/api/logs/stream")
async def logs_stream(request: Request, follow: bool = True):
    """Stream de logs em tempo real usando Server-Sent Events.
    follow=false devolve só as linhas recentes e encerra."""
    if not _check_debug_auth(request):
        return JSONResponse(status_code=403, content={"error": "Forbidden"})

    log_file = get_current_log_file_path()
    if not log_file:
        events = iter([sse_event("[ERROR] File logging is not configured")])
    else:
        events = stream_events(log_file, keep_following=follow)

    return StreamingResponse(
        events,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


def run():
    """Ponto de entrada: sobe a API de monitoramento (e o servidor TCP via lifespan)"""
    uvicorn.run(app, host=HTTP_HOST, port=HTTP_PORT)
