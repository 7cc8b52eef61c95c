"""Periodic command center refresh."""

import asyncio
import logging
from contextlib import suppress
from datetime import datetime
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from equine_center.config import Settings, get_settings
from equine_center.errors import ViewLoadError
from equine_center.services.filters import (
    FilterState,
    apply_filters,
    clear_filters,
    status_entry_predicate,
)
from equine_center.services.status import alert_counts
from equine_center.services.view_service import CommandCenterBoard, ViewService

logger = logging.getLogger(__name__)


class CommandCenterMonitor:
    """Keeps the latest unfiltered command center board fresh.

    A refresh that starts while another is still running is skipped, so
    boards are always published in load order. A failed refresh keeps the
    previous board.
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        settings: Settings | None = None,
        interval: float | None = None,
    ):
        self.session_factory = session_factory
        self.settings = settings or get_settings()
        if interval is None:
            interval = self.settings.command_center_refresh_seconds
        self.interval = interval
        self._lock = asyncio.Lock()
        self._task: asyncio.Task | None = None
        self._board: CommandCenterBoard | None = None

    @property
    def board(self) -> CommandCenterBoard | None:
        return self._board

    @property
    def last_update(self) -> datetime | None:
        return self._board.last_update if self._board else None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> CommandCenterBoard | None:
        """Load a new board; returns None when skipped or failed."""
        if self._lock.locked():
            logger.debug("Command center refresh still running, skipping")
            return None

        async with self._lock:
            try:
                async with self.session_factory() as session:
                    board = await ViewService(session, self.settings).command_center(
                        clear_filters()
                    )
            except ViewLoadError:
                logger.exception("Command center refresh failed")
                return None

            self._board = board
            return board

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("Command center refresh crashed, retrying next cycle")
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Starting command center monitor (every %.0fs)", self.interval)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Command center monitor stopped")

    def snapshot(
        self,
        filters: FilterState,
        owner_id: int | None = None,
        visible_to_owner: bool = False,
    ) -> CommandCenterBoard | None:
        """The latest board narrowed to the given filters.

        With ``visible_to_owner`` set, only horses of ``owner_id`` remain.
        """
        if self._board is None:
            return None
        entries = self._board.entries
        if visible_to_owner:
            entries = [e for e in entries if e.view.horse.owner_id == owner_id]
        entries = apply_filters(entries, filters, status_entry_predicate)
        return CommandCenterBoard(
            entries=entries,
            counts=alert_counts(e.status for e in entries),
            last_update=self._board.last_update,
        )
