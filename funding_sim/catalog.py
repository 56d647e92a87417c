"""
Exchange catalog, tracked assets and time-range presets
"""

# Tracked exchanges, in legend order
EXCHANGES = (
    'aster', 'binance', 'bingx', 'bitget', 'bluefin', 'bybit', 'cryptocom',
    'drift', 'edgex', 'ethereal', 'extended', 'gateio', 'hibachi', 'huobi',
    'hyperliquid', 'kucoin', 'kuma', 'lighter', 'mexc', 'okx', 'pacifica',
    'paradex',
)

# Stable line color per exchange
EXCHANGE_COLORS = {
    'aster': '#8B5CF6',
    'binance': '#F3BA2F',
    'bingx': '#0082FF',
    'bitget': '#0082FF',
    'bluefin': '#3B82F6',
    'bybit': '#F7A600',
    'cryptocom': '#103F68',
    'drift': '#00D4FF',
    'edgex': '#6366F1',
    'ethereal': '#10B981',
    'extended': '#F59E0B',
    'gateio': '#C99400',
    'hibachi': '#EF4444',
    'huobi': '#00D4FF',
    'hyperliquid': '#00D4FF',
    'kucoin': '#26A17B',
    'kuma': '#FF6B6B',
    'lighter': '#8B5CF6',
    'mexc': '#00D4FF',
    'okx': '#000000',
    'pacifica': '#06B6D4',
    'paradex': '#6366F1',
}

FALLBACK_COLOR = '#fff'

ASSETS = ('BTC', 'ETH', 'SOL', 'BNB', 'XRP', 'ADA', 'DOGE', 'DOT', 'MATIC', 'AVAX')
DEFAULT_ASSET = 'BTC'

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS

# key -> (label, lookback in ms)
RANGES = {
    '4h': ('4 Hours', 4 * HOUR_MS),
    '12h': ('12 Hours', 12 * HOUR_MS),
    '24h': ('24 Hours', 24 * HOUR_MS),
    '3d': ('3 Days', 3 * DAY_MS),
    '7d': ('7 Days', 7 * DAY_MS),
    '14d': ('14 Days', 14 * DAY_MS),
    '30d': ('30 Days', 30 * DAY_MS),
}
DEFAULT_RANGE = '4h'


def color_for(exchange: str) -> str:
    return EXCHANGE_COLORS.get(exchange, FALLBACK_COLOR)


def is_known_exchange(exchange: str) -> bool:
    return exchange in EXCHANGE_COLORS
