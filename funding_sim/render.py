"""
Chart renderers
Immediate-mode canvas drawing and a declarative Plotly figure, both fed by generate_data()
"""

from typing import Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .catalog import color_for
from .chart import ChartLayout, Scales, format_time
from .series import VALUE_MAX, VALUE_MIN, SeriesPoint

BACKGROUND = 'rgba(15, 15, 15, 0.9)'
GRID_COLOR = 'rgba(255, 255, 255, 0.1)'
ZERO_LINE_COLOR = 'rgba(255, 255, 255, 0.3)'
AXIS_COLOR = 'rgba(255, 255, 255, 0.5)'
LABEL_COLOR = 'rgba(255, 255, 255, 0.7)'
Y_AXIS_TITLE = 'Funding (bps)'


def line_coords(scales: Scales, points: Sequence[SeriesPoint], exchange: str):
    """Pixel coordinates of one exchange's line as two numpy arrays"""
    times = np.array([p.time for p in points], dtype=float)
    values = np.array([p.values[exchange] for p in points], dtype=float)
    layout = scales.layout
    if scales.time_range == 0:
        xs = np.full(len(times), float(layout.pad_left))
    else:
        xs = layout.pad_left + (times - scales.min_time) / scales.time_range * layout.plot_width
    frac = (values - scales.y_min) / (scales.y_max - scales.y_min)
    ys = layout.pad_top + layout.plot_height - frac * layout.plot_height
    return xs, ys


def _hline(surface, layout: ChartLayout, y: float):
    surface.begin_path()
    surface.move_to(layout.pad_left, y)
    surface.line_to(layout.right, y)
    surface.stroke()


def draw_chart(surface, points: Sequence[SeriesPoint], visible: Sequence[str],
               layout: Optional[ChartLayout] = None, tz=None):
    """
    Draw grid, axes, labels and one line per visible exchange

    ``surface`` is any canvas-like object exposing clear_rect, fill_rect,
    begin_path, move_to, line_to, stroke, fill_text, set_line_dash, save,
    restore, translate and rotate, plus the assignable attributes
    stroke_style, fill_style, line_width, font, text_align and text_baseline.
    The surface is not retained after the call.
    """
    layout = layout or ChartLayout()

    surface.clear_rect(0, 0, layout.width, layout.height)
    surface.fill_style = BACKGROUND
    surface.fill_rect(0, 0, layout.width, layout.height)

    if not points:
        return

    scales = Scales.for_points(layout, points)
    levels = range(int(VALUE_MIN), int(VALUE_MAX) + 1)
    ticks = scales.time_ticks()

    # Grid
    surface.stroke_style = GRID_COLOR
    surface.line_width = 1
    for level in levels:
        _hline(surface, layout, scales.y(level))
    for t in ticks:
        x = scales.x(t)
        surface.begin_path()
        surface.move_to(x, layout.pad_top)
        surface.line_to(x, layout.bottom)
        surface.stroke()

    # Zero line
    surface.stroke_style = ZERO_LINE_COLOR
    surface.line_width = 1
    surface.set_line_dash([5, 5])
    _hline(surface, layout, scales.y(0))
    surface.set_line_dash([])

    # Axes
    surface.stroke_style = AXIS_COLOR
    surface.line_width = 2
    surface.begin_path()
    surface.move_to(layout.pad_left, layout.pad_top)
    surface.line_to(layout.pad_left, layout.bottom)
    surface.line_to(layout.right, layout.bottom)
    surface.stroke()

    # Y labels
    surface.fill_style = LABEL_COLOR
    surface.font = '12px sans-serif'
    surface.text_align = 'right'
    surface.text_baseline = 'middle'
    for level in levels:
        surface.fill_text(str(level), layout.pad_left - 10, scales.y(level))

    surface.save()
    surface.translate(20, layout.height / 2)
    surface.rotate(-np.pi / 2)
    surface.text_align = 'center'
    surface.fill_text(Y_AXIS_TITLE, 0, 0)
    surface.restore()

    # X labels
    surface.text_align = 'center'
    surface.text_baseline = 'top'
    for t in ticks:
        surface.fill_text(format_time(t, tz), scales.x(t), layout.bottom + 10)

    # Lines
    for exchange in visible:
        if exchange not in points[0].values:
            continue
        xs, ys = line_coords(scales, points, exchange)
        surface.stroke_style = color_for(exchange)
        surface.line_width = 2
        surface.begin_path()
        surface.move_to(float(xs[0]), float(ys[0]))
        for x, y in zip(xs[1:], ys[1:]):
            surface.line_to(float(x), float(y))
        surface.stroke()


def build_figure(points: Sequence[SeriesPoint], visible: Sequence[str],
                 title: str = 'Historical Funding Rates', height: int = 500) -> go.Figure:
    """Plotly line chart of the visible exchanges"""
    fig = go.Figure()
    times = pd.to_datetime([p.time for p in points], unit='ms', utc=True)

    for exchange in visible:
        if points and exchange not in points[0].values:
            continue
        fig.add_trace(go.Scatter(
            x=times,
            y=[p.values[exchange] for p in points],
            mode='lines',
            name=exchange.upper(),
            line=dict(color=color_for(exchange), width=2),
            hovertemplate='%{y:.2f} bps',
        ))

    fig.add_hline(y=0, line_dash='dash', line_width=1, line_color=ZERO_LINE_COLOR)

    fig.update_layout(
        title=title,
        height=height,
        template='plotly_dark',
        hovermode='x unified',
        plot_bgcolor='#0f0f0f',
        paper_bgcolor='#0f0f0f',
        font=dict(color='#d1d4dc'),
        yaxis=dict(title=Y_AXIS_TITLE, range=[VALUE_MIN, VALUE_MAX], dtick=1),
        xaxis=dict(tickformat='%H:%M'),
        margin=dict(l=60, r=20, t=50, b=40),
    )
    fig.update_xaxes(showgrid=True, gridcolor='rgba(255,255,255,0.1)')
    fig.update_yaxes(showgrid=True, gridcolor='rgba(255,255,255,0.1)')
    return fig
