"""Canvas draw commands and the Plotly figure built from a series set."""
from datetime import timezone

import numpy as np

from funding_sim.catalog import EXCHANGES
from funding_sim.chart import ChartLayout, Scales
from funding_sim.render import build_figure, draw_chart, line_coords
from funding_sim.series import generate_data

T0 = 1_704_067_200_000  # 2024-01-01 00:00 UTC
FOUR_HOURS = 4 * 3600 * 1000


class RecordingSurface:
    """Canvas stand-in that records every call and the stroke color in effect."""

    def __init__(self):
        self.calls = []

    def __getattr__(self, name):
        def record(*args):
            if name == "stroke":
                self.calls.append(("stroke", self.__dict__.get("stroke_style")))
            else:
                self.calls.append((name, args))
        return record

    def names(self, name):
        return [c for c in self.calls if c[0] == name]


def test_empty_series_only_clears_background():
    surface = RecordingSurface()
    draw_chart(surface, [], EXCHANGES)
    assert [c[0] for c in surface.calls] == ["clear_rect", "fill_rect"]


def test_draws_one_line_per_visible_exchange():
    points = generate_data("BTC", T0, T0 + FOUR_HOURS)
    surface = RecordingSurface()
    draw_chart(surface, points, ["okx", "kuma"], tz=timezone.utc)

    stroke_colors = [c[1] for c in surface.names("stroke")]
    assert "#000000" in stroke_colors
    assert "#FF6B6B" in stroke_colors
    assert "#EF4444" not in stroke_colors  # hibachi hidden


def test_line_uses_every_point():
    points = generate_data("BTC", T0, T0 + FOUR_HOURS)
    surface = RecordingSurface()
    draw_chart(surface, points, ["okx"])
    # 11 horizontal gridlines + 2 vertical + zero line each draw one segment,
    # the axes two, and the data line len(points) - 1
    assert len(surface.names("line_to")) == 11 + 2 + 1 + 2 + len(points) - 1


def test_labels_and_zero_line():
    points = generate_data("BTC", T0, T0 + FOUR_HOURS)
    surface = RecordingSurface()
    draw_chart(surface, points, [], tz=timezone.utc)

    texts = [c[1][0] for c in surface.names("fill_text")]
    assert texts[:11] == [str(i) for i in range(-5, 6)]
    assert "Funding (bps)" in texts
    assert texts[-2:] == ["00:00", "02:00"]
    assert ("set_line_dash", ([5, 5],)) in surface.calls
    assert ("set_line_dash", ([],)) in surface.calls


def test_unknown_exchange_is_skipped():
    points = generate_data("BTC", T0, T0 + FOUR_HOURS)
    surface = RecordingSurface()
    draw_chart(surface, points, ["nope"])
    assert "#fff" not in [c[1] for c in surface.names("stroke")]


def test_line_coords_match_scalar_scales():
    points = generate_data("ETH", T0, T0 + FOUR_HOURS)
    layout = ChartLayout(width=1000, height=500)
    scales = Scales.for_points(layout, points)
    xs, ys = line_coords(scales, points, "bybit")
    assert np.allclose(xs, [scales.x(p.time) for p in points])
    assert np.allclose(ys, [scales.y(p.values["bybit"]) for p in points])
    assert xs[0] == layout.pad_left and xs[-1] == layout.right


def test_build_figure_traces():
    points = generate_data("BTC", T0, T0 + FOUR_HOURS)
    fig = build_figure(points, ["aster", "okx"])
    assert [t.name for t in fig.data] == ["ASTER", "OKX"]
    assert fig.data[1].line.color == "#000000"
    assert list(fig.data[0].y) == [p.values["aster"] for p in points]
    assert list(fig.layout.yaxis.range) == [-5, 5]
    assert fig.layout.yaxis.title.text == "Funding (bps)"


def test_build_figure_empty():
    fig = build_figure([], EXCHANGES)
    assert len(fig.data) == len(EXCHANGES)
    assert all(len(t.y) == 0 for t in fig.data)
