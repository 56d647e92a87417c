"""UI event handling for the funding simulator and its rendered page."""
from datetime import timezone

import pytest

from funding_sim.catalog import EXCHANGES
from funding_sim.dashboard import DashboardGenerator
from funding_sim.series import generate_data, to_json
from funding_sim.simulator import FundingSimulator

NOW = 1_704_081_600_000  # 2024-01-01 04:00 UTC


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now


def test_refresh_uses_injected_clock():
    sim = FundingSimulator(clock=FakeClock())
    points = sim.refresh()
    assert sim.end_time == NOW
    assert sim.start_time == NOW - 4 * 3600 * 1000
    assert len(points) == 48
    assert to_json(points) == to_json(generate_data("BTC", sim.start_time, NOW, 0))


def test_asset_and_range_changes_regenerate():
    sim = FundingSimulator(clock=FakeClock())
    btc = to_json(sim.refresh())
    eth = to_json(sim.on_asset_changed("ETH"))
    assert eth != btc
    assert len(sim.on_range_changed("24h")) == 288


def test_unknown_range_raises():
    sim = FundingSimulator(clock=FakeClock())
    with pytest.raises(ValueError):
        sim.on_range_changed("1y")
    with pytest.raises(ValueError):
        FundingSimulator(range_key="1y")


def test_randomize_takes_seed_from_clock():
    clock = FakeClock()
    sim = FundingSimulator(clock=clock)
    before = to_json(sim.refresh())
    clock.now = NOW + 1234
    after = sim.on_randomize()
    assert sim.random_seed == NOW + 1234
    assert to_json(after) != before


def test_simulated_off_clears_points():
    sim = FundingSimulator(clock=FakeClock())
    sim.refresh()
    assert sim.on_simulated_toggled(False) == []
    assert len(sim.on_simulated_toggled(True)) == 48


def test_toggle_and_hover_only_show_visible():
    sim = FundingSimulator(clock=FakeClock())
    sim.refresh()
    sim.on_toggle("binance")
    sim.on_toggle("unknown")
    assert "binance" not in sim.visible_exchanges
    assert len(sim.visible_exchanges) == len(EXCHANGES) - 1

    tip = sim.on_hover(sim.layout.pad_left + 1, 100, tz=timezone.utc)
    assert tip.label == "00:00"
    assert "binance" not in [r.exchange for r in tip.rows]
    assert sim.on_hover(0, 0) is None


def test_resize_keeps_minimum_width():
    sim = FundingSimulator(clock=FakeClock())
    assert sim.on_resize(300).width == 800
    assert sim.on_resize(1240).width == 1200


def test_dashboard_page_contents():
    sim = FundingSimulator(clock=FakeClock(), asset="ETH", range_key="12h", random_seed=7)
    sim.on_toggle("okx")
    sim.refresh()
    html = DashboardGenerator().generate(sim)

    assert "Historical Funding Rates" in html
    assert '<option value="ETH" selected>' in html
    assert '<option value="12h" selected>12 Hours</option>' in html
    assert 'class="legend-item hidden" data-exchange="okx"' in html
    assert 'class="legend-item" data-exchange="aster"' in html
    assert "plotly" in html.lower()
    assert "Points: 144" in html
    # Randomize link carries the clock value as the new seed
    assert f"seed={NOW}" in html


def test_dashboard_simulated_off_message():
    sim = FundingSimulator(clock=FakeClock())
    sim.on_simulated_toggled(False)
    html = DashboardGenerator().generate(sim)
    assert "Simulated data is off" in html
    assert "checked" not in html.split('id="simulated-check"')[1].split(">")[0]


def test_dashboard_escapes_custom_asset():
    sim = FundingSimulator(clock=FakeClock(), asset="<b>X</b>")
    sim.refresh()
    html = DashboardGenerator().generate(sim)
    assert "<b>X</b>" not in html
    assert "&lt;b&gt;X&lt;/b&gt;" in html


def test_dashboard_save(tmp_path):
    gen = DashboardGenerator()
    out = tmp_path / "nested" / "funding.html"
    gen.save("<html></html>", str(out))
    assert out.read_text(encoding="utf-8") == "<html></html>"
