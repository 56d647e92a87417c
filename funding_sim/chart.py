"""
Chart geometry and interaction
Domain-to-pixel scales, nearest-point hover lookup and exchange visibility
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .catalog import EXCHANGES, HOUR_MS, color_for
from .series import VALUE_MAX, VALUE_MIN, SeriesPoint

TICK_INTERVAL_MS = 2 * HOUR_MS  # vertical gridline every 2 hours

MIN_CANVAS_WIDTH = 800


@dataclass
class ChartLayout:
    """Surface size and padding around the plot area"""
    width: int = 1200
    height: int = 600
    pad_top: int = 40
    pad_right: int = 200
    pad_bottom: int = 60
    pad_left: int = 80

    @property
    def plot_width(self) -> int:
        return self.width - self.pad_left - self.pad_right

    @property
    def plot_height(self) -> int:
        return self.height - self.pad_top - self.pad_bottom

    @property
    def right(self) -> int:
        return self.width - self.pad_right

    @property
    def bottom(self) -> int:
        return self.height - self.pad_bottom

    def contains(self, px: float, py: float) -> bool:
        """True when the pixel lies inside the plot area (edges included)"""
        return self.pad_left <= px <= self.right and self.pad_top <= py <= self.bottom

    def resized(self, container_width: float) -> 'ChartLayout':
        """Layout for a new container width, never narrower than 800px"""
        width = max(MIN_CANVAS_WIDTH, int(container_width - 40))
        return ChartLayout(width, self.height, self.pad_top, self.pad_right,
                           self.pad_bottom, self.pad_left)


class Scales:
    """Linear time -> x and value -> y mappings for one series set"""

    def __init__(self, layout: ChartLayout, min_time: int, max_time: int,
                 y_min: float = VALUE_MIN, y_max: float = VALUE_MAX):
        self.layout = layout
        self.min_time = min_time
        self.max_time = max_time
        self.y_min = y_min
        self.y_max = y_max

    @classmethod
    def for_points(cls, layout: ChartLayout, points: Sequence[SeriesPoint]) -> 'Scales':
        if not points:
            raise ValueError("Cannot scale an empty series")
        return cls(layout, points[0].time, points[-1].time)

    @property
    def time_range(self) -> int:
        return self.max_time - self.min_time

    def x(self, t: float) -> float:
        # Single-point series collapse onto the left edge
        if self.time_range == 0:
            return float(self.layout.pad_left)
        return self.layout.pad_left + ((t - self.min_time) / self.time_range) * self.layout.plot_width

    def y(self, value: float) -> float:
        frac = (value - self.y_min) / (self.y_max - self.y_min)
        return self.layout.pad_top + self.layout.plot_height - frac * self.layout.plot_height

    def time_at(self, px: float) -> float:
        """Inverse of x(): pixel column back to a timestamp"""
        return self.min_time + ((px - self.layout.pad_left) / self.layout.plot_width) * self.time_range

    def time_ticks(self, step: int = TICK_INTERVAL_MS) -> List[int]:
        return list(range(self.min_time, self.max_time + 1, step))


def nearest_point(points: Sequence[SeriesPoint], query_time: float) -> Optional[SeriesPoint]:
    """
    Point whose time is closest to query_time

    Linear scan with a strict comparison, so ties go to the earlier point.
    """
    if not points:
        return None
    closest = points[0]
    min_dist = abs(closest.time - query_time)
    for point in points:
        dist = abs(point.time - query_time)
        if dist < min_dist:
            min_dist = dist
            closest = point
    return closest


def format_time(timestamp_ms: int, tz=None) -> str:
    """HH:MM label; local time unless tz is given"""
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=tz).strftime('%H:%M')


@dataclass
class TooltipRow:
    exchange: str
    value: float
    color: str

    @property
    def text(self) -> str:
        return f"{self.exchange.upper()}: {self.value:.2f} bps"


@dataclass
class Tooltip:
    """Hover readout for the nearest point"""
    time: int
    label: str
    rows: List[TooltipRow] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'time': self.time,
            'label': self.label,
            'rows': [{'exchange': r.exchange, 'value': r.value, 'color': r.color, 'text': r.text}
                     for r in self.rows],
        }


def hover(points: Sequence[SeriesPoint], layout: ChartLayout, mouse_x: float, mouse_y: float,
          visible: Iterable[str], tz=None) -> Optional[Tooltip]:
    """Resolve a pointer position to a tooltip, or None outside the plot area"""
    if not points or not layout.contains(mouse_x, mouse_y):
        return None
    scales = Scales.for_points(layout, points)
    point = nearest_point(points, scales.time_at(mouse_x))
    rows = [
        TooltipRow(exchange, point.values[exchange], color_for(exchange))
        for exchange in visible
        if exchange in point.values
    ]
    return Tooltip(time=point.time, label=format_time(point.time, tz), rows=rows)


class VisibilitySet:
    """Exchanges currently drawn; all visible initially"""

    def __init__(self, exchanges: Iterable[str] = EXCHANGES):
        self._order = tuple(exchanges)
        self._visible = set(self._order)

    def toggle(self, exchange: str) -> bool:
        """Flip an exchange; unknown ids are ignored. Returns the new state."""
        if exchange not in self._order:
            return False
        if exchange in self._visible:
            self._visible.discard(exchange)
            return False
        self._visible.add(exchange)
        return True

    def hide(self, exchanges: Iterable[str]):
        for exchange in exchanges:
            if exchange in self._visible:
                self.toggle(exchange)

    def is_visible(self, exchange: str) -> bool:
        return exchange in self._visible

    @property
    def visible(self) -> List[str]:
        """Visible ids in catalog order"""
        return [e for e in self._order if e in self._visible]

    @property
    def hidden(self) -> List[str]:
        return [e for e in self._order if e not in self._visible]

    def __contains__(self, exchange: str) -> bool:
        return self.is_visible(exchange)

    def __len__(self) -> int:
        return len(self._visible)
