# core/token_sweeper.py
import asyncio
import logging
from typing import Optional
from service.access_token_service import AccessTokenService

logger = logging.getLogger(__name__)


class TokenSweeper:
    """
    Detached interval job: sweep once at start, then every `interval_seconds`.
    Shares only the token ledger with request handlers; a failed sweep is
    logged and retried on the next tick.
    """

    def __init__(self, tokens: AccessTokenService, interval_seconds: int) -> None:
        self._tokens = tokens
        self._interval = max(1, int(interval_seconds))
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="token-sweeper")
        logger.info("sweeper.started interval=%ds", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("sweeper.stopped")

    async def run_once(self) -> int:
        try:
            return await self._tokens.sweep()
        except Exception:
            logger.exception("sweeper.error")
            return 0

    async def _run(self) -> None:
        while True:
            await self.run_once()
            await asyncio.sleep(self._interval)
