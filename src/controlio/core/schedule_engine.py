"""ScheduleEngine — wall-clock rules that inject commands.

Each entry becomes an APScheduler cron job evaluated in a fixed timezone.
A job only puts the entry's command on the event bus; the router applies it
like any other command.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable
from zoneinfo import ZoneInfo

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from controlio.core import events
from controlio.core.event_bus import EventBus
from controlio.core.models.command import CommandEvent, StructuredPayload
from controlio.core.models.config import ScheduleEntry

_log = logging.getLogger(__name__)


class ScheduleEngine:
    """Runs an immutable list of :class:`ScheduleEntry` as cron jobs.

    Args:
        entries: Rules, kept in the given order.
        event_bus: Bus the commands are published on.
        timezone: IANA zone name the hour/minute are interpreted in.
    """

    def __init__(
        self,
        entries: Iterable[ScheduleEntry],
        event_bus: EventBus,
        timezone: str = "Europe/Berlin",
    ) -> None:
        self._entries: tuple[ScheduleEntry, ...] = tuple(entries)
        self._bus = event_bus
        self._tz = ZoneInfo(timezone)
        self._triggers: tuple[CronTrigger, ...] = tuple(
            CronTrigger(
                hour=entry.hour,
                minute=entry.minute,
                day_of_week=entry.weekdays.day_of_week,
                timezone=self._tz,
            )
            for entry in self._entries
        )
        self._scheduler: AsyncIOScheduler | None = None

    @property
    def entries(self) -> tuple[ScheduleEntry, ...]:
        return self._entries

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def due_entries(self, moment: datetime) -> list[int]:
        """Return indexes of entries whose trigger fires in the minute of *moment*."""
        minute = moment.astimezone(self._tz).replace(second=0, microsecond=0)
        return [
            index
            for index, trigger in enumerate(self._triggers)
            if trigger.get_next_fire_time(None, minute) == minute
        ]

    async def fire_due(self, moment: datetime | None = None) -> list[ScheduleEntry]:
        """Publish the commands of all entries due at *moment* (default: now)."""
        moment = moment or datetime.now(self._tz)
        fired = []
        for index in self.due_entries(moment):
            await self._fire(index)
            fired.append(self._entries[index])
        return fired

    async def _fire(self, index: int) -> None:
        entry = self._entries[index]
        _log.info(
            "Schedule %02d:%02d (%s) → %s=%r",
            entry.hour, entry.minute, entry.weekdays.value, entry.command, entry.payload,
        )
        command = CommandEvent(entry.command, StructuredPayload(entry.payload), source="schedule")
        await self._bus.publish(events.COMMAND_ISSUED, {"command": command})

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Register one job per entry and start the scheduler.  No-op without entries."""
        if not self._entries:
            _log.info("No schedule entries configured")
            return
        self._scheduler = AsyncIOScheduler(timezone=self._tz)
        for index, trigger in enumerate(self._triggers):
            self._scheduler.add_job(
                self._fire,
                trigger=trigger,
                args=[index],
                id=f"schedule-{index}",
                coalesce=True,
                misfire_grace_time=60,
            )
        self._scheduler.start()
        _log.info("Schedule engine started (%d entries, tz=%s)", len(self._entries), self._tz.key)

    async def stop(self) -> None:
        if self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=False)
            self._scheduler = None

    def next_fire_times(self) -> list[datetime | None]:
        """Next run time of each job, in entry order (empty when not running)."""
        if self._scheduler is None:
            return []
        return [
            self._scheduler.get_job(f"schedule-{index}").next_run_time
            for index in range(len(self._entries))
        ]
