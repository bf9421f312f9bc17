"""
IdleReaper - Expulsa sessões inativas
Roda periodicamente e usa o mesmo caminho de kick/desconexão do servidor
"""
import asyncio
import time
from typing import Callable, List, Optional

from .config import IDLE_CHECK_INTERVAL_SECONDS, IDLE_TIMEOUT_SECONDS
from .sessions import SessionRegistry
from .logger import get_logger

logger = get_logger("idle_reaper")

IDLE_KICK_REASON = "idle timeout"


class IdleReaper:
    def __init__(
        self,
        registry: SessionRegistry,
        kick: Callable[[str, str], bool],
        threshold_seconds: float = IDLE_TIMEOUT_SECONDS,
        interval_seconds: float = IDLE_CHECK_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.registry = registry
        self._kick = kick
        self.threshold_seconds = threshold_seconds
        self.interval_seconds = interval_seconds
        self.clock = clock
        self.cleanup_task: Optional[asyncio.Task] = None

        logger.info(f"IdleReaper initialized (timeout: {threshold_seconds}s, every {interval_seconds}s)")

    def sweep(self, now: Optional[float] = None) -> List[str]:
        """Expulsa as sessões inativas há mais que o limite; devolve os ids expulsos"""
        now = self.clock() if now is None else now
        evicted = []

        for session in self.registry.snapshot():
            idle = session.idle_for(now)
            if idle <= self.threshold_seconds:
                continue
            logger.info(f"Session {session.id} inactive for {idle:.0f}s, evicting")
            # Pode já ter saído entre o snapshot e o kick
            if self._kick(session.id, IDLE_KICK_REASON):
                evicted.append(session.id)

        if evicted:
            logger.info(f"Evicted {len(evicted)} idle sessions")
        return evicted

    async def start(self):
        """Inicia task de varredura periódica"""
        if self.cleanup_task is None or self.cleanup_task.done():
            self.cleanup_task = asyncio.create_task(self._cleanup_loop())
            logger.info("Idle reaper task started")

    async def stop(self):
        """Para a task de varredura"""
        if self.cleanup_task and not self.cleanup_task.done():
            self.cleanup_task.cancel()
            try:
                await self.cleanup_task
            except asyncio.CancelledError:
                pass
            logger.info("Idle reaper task stopped")
        self.cleanup_task = None

    async def _cleanup_loop(self):
        while True:
            try:
                await asyncio.sleep(self.interval_seconds)
                self.sweep()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.exception(f"Error in idle reaper loop: {e}")
