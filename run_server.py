"""
Historical Funding Site - Main Entry Point
Serves the static export and the funding simulator

Usage:
    py run_server.py                            # Serve on 127.0.0.1:3001
    py run_server.py --port 8080 --site-root ./out
    py run_server.py --export output/funding.html --asset ETH --range 24h
"""

import argparse
import asyncio
import os
import webbrowser

from funding_sim.catalog import DEFAULT_ASSET, DEFAULT_RANGE, RANGES
from funding_sim.dashboard import DashboardGenerator
from funding_sim.simulator import FundingSimulator
from funding_sim.site_server import DEFAULT_HOST, DEFAULT_PORT, SiteServer


def export_page(path: str, asset: str, range_key: str, seed: int):
    """Render the simulator page once and write it to disk"""
    sim = FundingSimulator(asset=asset, range_key=range_key, random_seed=seed)
    points = sim.refresh()
    generator = DashboardGenerator()
    generator.save(generator.generate(sim), path)
    print(f"[OK] Exported {len(points)} points for {asset} ({range_key}) to {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Historical Funding Site Server')
    parser.add_argument('--host', default=os.environ.get('HOST', DEFAULT_HOST),
                        help=f'Bind address (default: {DEFAULT_HOST}, env HOST)')
    parser.add_argument('--port', type=int, default=int(os.environ.get('PORT', DEFAULT_PORT)),
                        help=f'Port to listen on (default: {DEFAULT_PORT}, env PORT)')
    parser.add_argument('--site-root', default=os.environ.get('SITE_ROOT'),
                        help='Directory holding the static export (default: ./site, env SITE_ROOT)')
    parser.add_argument('--open', action='store_true',
                        help='Open the simulator page in a browser')
    parser.add_argument('--export', metavar='PATH',
                        help='Write a static simulator page to PATH and exit')
    parser.add_argument('--asset', default=DEFAULT_ASSET,
                        help=f'Asset for --export (default: {DEFAULT_ASSET})')
    parser.add_argument('--range', dest='range_key', default=DEFAULT_RANGE, choices=list(RANGES),
                        help=f'Time range for --export (default: {DEFAULT_RANGE})')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random seed for --export (default: 0)')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.export:
        export_page(args.export, args.asset, args.range_key, args.seed)
        return

    server = SiteServer(host=args.host, port=args.port, site_root=args.site_root)
    if args.open:
        webbrowser.open(f'http://{args.host}:{args.port}/funding/historical')

    try:
        asyncio.run(server.run())
    except KeyboardInterrupt:
        print("\n[STOP] Shutting down...")


if __name__ == '__main__':
    main()
