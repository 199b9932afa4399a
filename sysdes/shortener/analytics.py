"""Click tracking and reporting for short links."""

from __future__ import annotations

import copy
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, TypeVar

_T = TypeVar("_T")


def _truncate(items: list[_T], limit: int) -> list[_T]:
    # A negative limit keeps everything.
    return items[:limit] if limit >= 0 else items


def _ranked(counts: dict[str, int]) -> list[tuple[str, int]]:
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


@dataclass
class ClickEvent:
    """A single visit to a short link."""

    short_code: str
    ip_address: str
    user_agent: str
    referrer: str
    timestamp: datetime
    country: str
    city: str
    device_type: str


@dataclass
class UrlStats:
    """Aggregated click figures for one short link."""

    short_code: str
    total_clicks: int
    unique_clicks: int
    first_click: datetime
    last_click: datetime
    clicks_by_country: dict[str, int] = field(default_factory=dict)
    clicks_by_device: dict[str, int] = field(default_factory=dict)
    clicks_by_referrer: dict[str, int] = field(default_factory=dict)


class Analytics:
    """Records clicks per short code and answers questions about them."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._events: dict[str, list[ClickEvent]] = defaultdict(list)
        self._stats: dict[str, UrlStats] = {}
        self._visitors: dict[str, set[str]] = defaultdict(set)

    def record_click(
        self,
        short_code: str,
        ip_address: str,
        user_agent: str = "",
        referrer: str = "",
        country: str = "",
        city: str = "",
        device_type: str = "",
    ) -> None:
        now = self._clock()
        event = ClickEvent(
            short_code, ip_address, user_agent, referrer, now, country, city, device_type
        )
        self._events[short_code].append(event)
        visitors = self._visitors[short_code]
        visitors.add(ip_address)

        stats = self._stats.get(short_code)
        if stats is None:
            stats = self._stats[short_code] = UrlStats(short_code, 0, 0, now, now)
        stats.total_clicks += 1
        stats.unique_clicks = len(visitors)
        stats.last_click = now
        for value, table in (
            (country, stats.clicks_by_country),
            (device_type, stats.clicks_by_device),
            (referrer, stats.clicks_by_referrer),
        ):
            if value:
                table[value] = table.get(value, 0) + 1

    def url_stats(self, short_code: str) -> UrlStats:
        """A copy of the stats for ``short_code``, or empty stats if none exist."""
        stats = self._stats.get(short_code)
        if stats is not None:
            return copy.deepcopy(stats)
        now = self._clock()
        return UrlStats(short_code, 0, 0, now, now)

    def click_events(self, short_code: str, limit: int = 100) -> list[ClickEvent]:
        """Events for ``short_code``, newest first."""
        events = sorted(self._events.get(short_code, ()), key=lambda e: e.timestamp, reverse=True)
        return _truncate(events, limit)

    def total_clicks(self, short_code: str) -> int:
        stats = self._stats.get(short_code)
        return stats.total_clicks if stats is not None else 0

    def unique_clicks(self, short_code: str) -> int:
        return len(self._visitors.get(short_code, ()))

    def top_urls_by_clicks(self, limit: int = 10) -> list[tuple[str, int]]:
        ranked = _ranked({code: s.total_clicks for code, s in self._stats.items()})
        return _truncate(ranked, limit)

    def clicks_by_country(self, short_code: str) -> list[tuple[str, int]]:
        stats = self._stats.get(short_code)
        return _ranked(stats.clicks_by_country) if stats is not None else []

    def clicks_by_device(self, short_code: str) -> list[tuple[str, int]]:
        stats = self._stats.get(short_code)
        return _ranked(stats.clicks_by_device) if stats is not None else []

    def clicks_by_referrer(self, short_code: str) -> list[tuple[str, int]]:
        stats = self._stats.get(short_code)
        return _ranked(stats.clicks_by_referrer) if stats is not None else []

    def _recent(self, short_code: str, days: int) -> list[ClickEvent]:
        cutoff = self._clock() - timedelta(hours=24 * days)
        return [e for e in self._events.get(short_code, ()) if e.timestamp >= cutoff]

    def clicks_by_hour(self, short_code: str, days: int = 7) -> list[tuple[str, int]]:
        """Clicks in the last ``days`` days grouped by local hour, as ``HH:00``."""
        counts = Counter(e.timestamp.hour for e in self._recent(short_code, days))
        return [(f"{hour:02d}:00", n) for hour, n in sorted(counts.items())]

    def clicks_by_day(self, short_code: str, days: int = 30) -> list[tuple[str, int]]:
        """Clicks in the last ``days`` days grouped by date, as ``YYYY-MM-DD``."""
        counts = Counter(
            e.timestamp.strftime("%Y-%m-%d") for e in self._recent(short_code, days)
        )
        return sorted(counts.items())

    def cleanup_old_events(self, days_to_keep: int = 90) -> None:
        """Drop raw events older than the window; aggregated stats are kept."""
        cutoff = self._clock() - timedelta(hours=24 * days_to_keep)
        for code, events in self._events.items():
            self._events[code] = [e for e in events if e.timestamp >= cutoff]

    def clear_url_stats(self, short_code: str) -> None:
        self._events.pop(short_code, None)
        self._stats.pop(short_code, None)
        self._visitors.pop(short_code, None)

    def clear_all(self) -> None:
        self._events.clear()
        self._stats.clear()
        self._visitors.clear()