"""
Synthetic Funding Series Engine
Seeded hash -> seeded LCG -> bounded random walk, one line per exchange
"""

import math
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple

import pandas as pd

from .catalog import EXCHANGES, RANGES

INTERVAL_MS = 5 * 60 * 1000  # 5 min between points

VALUE_MIN = -5.0
VALUE_MAX = 5.0

# LCG constants
LCG_MULTIPLIER = 9301
LCG_INCREMENT = 49297
LCG_MODULUS = 233280

STEP_SCALE = 0.5


@dataclass
class SeriesPoint:
    """One timestamp with a funding value per exchange"""
    time: int  # epoch millis
    values: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {'time': self.time, **self.values}


def system_clock() -> int:
    """Current wall-clock time in epoch millis"""
    return int(time.time() * 1000)


def coerce_seed(value) -> int:
    """
    Normalize a seed to an int
    Missing, non-numeric and non-finite values fall back to 0
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        try:
            return int(value)
        except ValueError:
            pass
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number)


def _utf16_units(text: str) -> Iterable[int]:
    """Yield UTF-16 code units, matching how browsers index strings"""
    raw = text.encode('utf-16-le')
    for i in range(0, len(raw), 2):
        yield raw[i] | (raw[i + 1] << 8)


def derive_seed(asset: str, series_id: str, start_time: int) -> int:
    """
    Stable per-line seed from asset, exchange and range start

    Polynomial string hash (x31) folded into a signed 32-bit int,
    returned as its absolute value.
    """
    key = f"{asset}_{series_id}_{start_time}"
    h = 0
    for unit in _utf16_units(key):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def make_generator(seed) -> Callable[[], float]:
    """Linear congruential generator returning floats in [0, 1)"""
    state = coerce_seed(seed)

    def generator() -> float:
        nonlocal state
        state = (state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return state / LCG_MODULUS

    return generator


def random_walk(seed, num_points: int,
                min_value: float = VALUE_MIN, max_value: float = VALUE_MAX) -> List[float]:
    """
    Bounded random walk of exactly num_points values

    The walk starts at a uniformly drawn level and every emitted value
    is the previous one plus a step in [-0.25, 0.25), clamped to the bounds.
    """
    rng = make_generator(seed)
    data = []
    current = rng() * (max_value - min_value) + min_value

    for _ in range(max(0, num_points)):
        change = (rng() - 0.5) * STEP_SCALE
        current = max(min_value, min(max_value, current + change))
        data.append(current)

    return data


def point_count(start_time: int, end_time: int, interval: int = INTERVAL_MS) -> int:
    return max(0, (end_time - start_time) // interval)


def generate_data(asset: str, start_time: int, end_time: int, random_seed=0,
                  exchanges: Tuple[str, ...] = EXCHANGES) -> List[SeriesPoint]:
    """Build the full series set for one asset and time range"""
    start_time = int(start_time)
    end_time = int(end_time)
    random_seed = coerce_seed(random_seed)
    num_points = point_count(start_time, end_time)
    if num_points == 0:
        return []

    # One walk per exchange, indexed below
    walks = {
        exchange: random_walk(derive_seed(asset, exchange, start_time) + random_seed, num_points)
        for exchange in exchanges
    }

    return [
        SeriesPoint(
            time=start_time + i * INTERVAL_MS,
            values={exchange: walks[exchange][i] for exchange in exchanges},
        )
        for i in range(num_points)
    ]


def resolve_time_range(range_key: str, now_ms: Optional[int] = None,
                       clock: Callable[[], int] = system_clock) -> Tuple[int, int]:
    """Return (start, end) in epoch millis for a range preset ending now"""
    if range_key not in RANGES:
        raise ValueError(f"Unsupported range: {range_key}")
    end = int(now_ms) if now_ms is not None else clock()
    _, lookback = RANGES[range_key]
    return end - lookback, end


def to_dataframe(points: List[SeriesPoint]) -> pd.DataFrame:
    """Series set as a DataFrame: timestamp column plus one column per exchange"""
    if not points:
        return pd.DataFrame(columns=['timestamp', *EXCHANGES])
    df = pd.DataFrame([p.to_dict() for p in points])
    df.insert(0, 'timestamp', pd.to_datetime(df.pop('time'), unit='ms', utc=True))
    return df


def to_json(points: List[SeriesPoint]) -> list:
    return [p.to_dict() for p in points]
