"""
logtail.py - Leitura do arquivo de log para o endpoint de debug
"""
import asyncio
import os
from typing import AsyncIterator, List

import aiofiles

RECENT_LINES = 50
POLL_INTERVAL_SECONDS = 0.5


def sse_event(text: str) -> str:
    return f"data: {text.rstrip()}\n\n"


async def read_recent_lines(path: str, limit: int = RECENT_LINES) -> List[str]:
    """Últimas `limit` linhas não vazias; lista vazia se o arquivo ainda não existe"""
    if not os.path.exists(path):
        return []
    async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
        content = await f.read()
    lines = [line for line in content.splitlines() if line.strip()]
    return lines[-limit:]


async def follow(path: str, offset: int, poll_interval: float = POLL_INTERVAL_SECONDS) -> AsyncIterator[str]:
    """tail -f a partir de `offset`; recomeça do início se o arquivo encolher"""
    while True:
        size = os.path.getsize(path) if os.path.exists(path) else 0
        if size < offset:
            offset = 0
        if size > offset:
            async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
                await f.seek(offset)
                chunk = await f.read()
            offset = size
            for line in chunk.splitlines():
                if line.strip():
                    yield line
            continue
        await asyncio.sleep(poll_interval)


async def stream_events(path: str, keep_following: bool = True) -> AsyncIterator[str]:
    """Eventos SSE: as linhas recentes e depois (opcionalmente) as novas"""
    offset = os.path.getsize(path) if os.path.exists(path) else 0
    try:
        for line in await read_recent_lines(path):
            yield sse_event(line)
        if not keep_following:
            return
        async for line in follow(path, offset):
            yield sse_event(line)
    except OSError as e:
        yield sse_event(f"[ERROR] Could not read log file: {e}")
