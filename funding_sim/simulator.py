"""
Historical funding simulator state
Holds the selected asset, range, seed and visible exchanges and regenerates on every UI event
"""

from typing import Callable, List, Optional

from .catalog import DEFAULT_ASSET, DEFAULT_RANGE, EXCHANGES, RANGES
from .chart import ChartLayout, Tooltip, VisibilitySet, hover
from .series import SeriesPoint, coerce_seed, generate_data, resolve_time_range, system_clock


class FundingSimulator:
    """UI-facing controller; the random seed is explicit state, not a global"""

    def __init__(self, clock: Callable[[], int] = system_clock,
                 asset: str = DEFAULT_ASSET, range_key: str = DEFAULT_RANGE,
                 random_seed: int = 0, layout: Optional[ChartLayout] = None):
        if range_key not in RANGES:
            raise ValueError(f"Unsupported range: {range_key}")
        self.clock = clock
        self.asset = asset
        self.range_key = range_key
        self.random_seed = coerce_seed(random_seed)
        self.simulated = True
        self.layout = layout or ChartLayout()
        self.visibility = VisibilitySet(EXCHANGES)
        self.points: List[SeriesPoint] = []
        self.start_time = 0
        self.end_time = 0

    @property
    def visible_exchanges(self) -> List[str]:
        return self.visibility.visible

    def refresh(self) -> List[SeriesPoint]:
        """Regenerate the whole series set for the current selection"""
        if not self.simulated:
            self.points = []
            return self.points
        self.start_time, self.end_time = resolve_time_range(self.range_key, clock=self.clock)
        self.points = generate_data(self.asset, self.start_time, self.end_time, self.random_seed)
        return self.points

    # --- UI events ---

    def on_asset_changed(self, asset: str) -> List[SeriesPoint]:
        self.asset = asset
        return self.refresh()

    def on_range_changed(self, range_key: str) -> List[SeriesPoint]:
        if range_key not in RANGES:
            raise ValueError(f"Unsupported range: {range_key}")
        self.range_key = range_key
        return self.refresh()

    def on_simulated_toggled(self, enabled: bool) -> List[SeriesPoint]:
        self.simulated = bool(enabled)
        return self.refresh()

    def on_randomize(self) -> List[SeriesPoint]:
        """New seed from the clock, same as clicking Randomize"""
        self.random_seed = coerce_seed(self.clock())
        return self.refresh()

    def on_toggle(self, exchange: str) -> bool:
        """Flip one legend entry; no regeneration needed"""
        return self.visibility.toggle(exchange)

    def on_resize(self, container_width: float) -> ChartLayout:
        self.layout = self.layout.resized(container_width)
        return self.layout

    def on_hover(self, mouse_x: float, mouse_y: float, tz=None) -> Optional[Tooltip]:
        return hover(self.points, self.layout, mouse_x, mouse_y, self.visible_exchanges, tz)
