"""
Historical Funding Dashboard Generator
Server-rendered page: controls, Plotly chart and a clickable exchange legend
"""

import html
from datetime import datetime, timezone
from urllib.parse import urlencode

from .catalog import ASSETS, EXCHANGES, RANGES, color_for
from .render import build_figure
from .simulator import FundingSimulator


class DashboardGenerator:
    """Generate the simulator page HTML"""

    PAGE_PATH = '/funding/historical'

    TEMPLATE = '''<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Historical Funding Rates</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            background: #0a0a0f;
            color: #fff;
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
        }}
        #historical-funding-simulator {{
            padding: 20px;
            max-width: 1400px;
            margin: 0 auto;
        }}
        .header {{
            display: flex;
            justify-content: space-between;
            align-items: center;
            margin-bottom: 20px;
            flex-wrap: wrap;
            gap: 15px;
        }}
        .header h1 {{ font-size: 24px; }}
        .controls {{ display: flex; gap: 10px; align-items: center; flex-wrap: wrap; }}
        .controls select, .controls button, .controls a.button {{
            padding: 8px 12px;
            background: rgba(255,255,255,0.1);
            border: 1px solid rgba(255,255,255,0.2);
            border-radius: 6px;
            color: #fff;
            font-size: 14px;
            text-decoration: none;
            cursor: pointer;
        }}
        .controls label {{ display: flex; align-items: center; gap: 8px; font-size: 14px; }}
        .chart-container {{
            position: relative;
            background: rgba(0,0,0,0.3);
            border-radius: 8px;
            padding: 20px;
            border: 1px solid rgba(255,255,255,0.1);
            display: grid;
            grid-template-columns: 1fr 180px;
            gap: 15px;
        }}
        #chart-legend {{
            background: rgba(0,0,0,0.8);
            padding: 15px;
            border-radius: 8px;
            border: 1px solid rgba(255,255,255,0.1);
            max-height: 500px;
            overflow-y: auto;
        }}
        .legend-item {{
            display: flex;
            align-items: center;
            padding: 8px;
            font-size: 12px;
            color: #fff;
            text-decoration: none;
        }}
        .legend-item.hidden {{ opacity: 0.5; color: #888; }}
        .legend-dot {{ width: 12px; height: 12px; margin-right: 8px; border-radius: 2px; }}
        .empty {{ padding: 40px; text-align: center; color: #787b86; }}
        .footer {{ margin-top: 10px; font-size: 11px; color: #787b86; }}
    </style>
</head>
<body>
    <div id="historical-funding-simulator">
        <form class="header" method="get" action="{page_path}">
            <h1>Historical Funding Rates</h1>
            <div class="controls">
                <select id="asset-select" name="asset" onchange="this.form.submit()">{asset_options}</select>
                <select id="range-select" name="range" onchange="this.form.submit()">{range_options}</select>
                <input type="hidden" name="simulated" value="0">
                <label><input type="checkbox" id="simulated-check" name="simulated" value="1"{simulated_checked} onchange="this.form.submit()"> Simulated data</label>
                <input type="hidden" name="seed" value="{seed}">
                <input type="hidden" name="hidden" value="{hidden}">
                <a class="button" id="randomize-btn" href="{randomize_href}">Randomize</a>
            </div>
        </form>
        <div class="chart-container">
            <div id="funding-chart">{chart}</div>
            <div id="chart-legend">{legend}</div>
        </div>
        <div class="footer">Generated: {generated} UTC | Seed: {seed} | Points: {num_points}</div>
    </div>
</body>
</html>'''

    def __init__(self, page_path: str = PAGE_PATH, chart_height: int = 500):
        self.page_path = page_path
        self.chart_height = chart_height

    def _href(self, sim: FundingSimulator, **overrides) -> str:
        params = {
            'asset': sim.asset,
            'range': sim.range_key,
            'seed': sim.random_seed,
            'simulated': '1' if sim.simulated else '0',
        }
        hidden = ','.join(sim.visibility.hidden)
        if hidden:
            params['hidden'] = hidden
        params.update(overrides)
        return html.escape(f"{self.page_path}?{urlencode(params)}")

    def _asset_options(self, selected: str) -> str:
        assets = ASSETS if selected in ASSETS else (selected, *ASSETS)
        return ''.join(
            f'<option value="{html.escape(a)}"{" selected" if a == selected else ""}>{html.escape(a)}</option>'
            for a in assets
        )

    def _range_options(self, selected: str) -> str:
        return ''.join(
            f'<option value="{key}"{" selected" if key == selected else ""}>{label}</option>'
            for key, (label, _) in RANGES.items()
        )

    def _legend(self, sim: FundingSimulator) -> str:
        items = []
        for exchange in EXCHANGES:
            # Link state after toggling this exchange
            hidden = [e for e in sim.visibility.hidden if e != exchange]
            if sim.visibility.is_visible(exchange):
                hidden.append(exchange)
            href = self._href(sim, hidden=','.join(hidden))
            css = 'legend-item' if sim.visibility.is_visible(exchange) else 'legend-item hidden'
            items.append(
                f'<a class="{css}" data-exchange="{exchange}" href="{href}">'
                f'<span class="legend-dot" style="background: {color_for(exchange)}"></span>'
                f'{exchange.upper()}</a>'
            )
        return ''.join(items)

    def _chart(self, sim: FundingSimulator) -> str:
        if not sim.simulated:
            return '<div class="empty">Simulated data is off</div>'
        if not sim.points:
            return '<div class="empty">No data for this range</div>'
        fig = build_figure(sim.points, sim.visible_exchanges, title='', height=self.chart_height)
        return fig.to_html(full_html=False, include_plotlyjs='cdn')

    def generate(self, sim: FundingSimulator) -> str:
        """Render the page for the simulator's current (already refreshed) state"""
        return self.TEMPLATE.format(
            page_path=self.page_path,
            asset_options=self._asset_options(sim.asset),
            range_options=self._range_options(sim.range_key),
            simulated_checked=' checked' if sim.simulated else '',
            seed=sim.random_seed,
            hidden=html.escape(','.join(sim.visibility.hidden)),
            randomize_href=self._href(sim, seed=sim.clock()),
            chart=self._chart(sim),
            legend=self._legend(sim),
            generated=datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S'),
            num_points=len(sim.points),
        )

    def save(self, html_text: str, output_path: str):
        """Save HTML to file"""
        import os
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(html_text)
