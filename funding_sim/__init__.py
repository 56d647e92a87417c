"""
Historical Funding Simulator
Deterministic synthetic funding-rate series, chart rendering and the static site server
"""
