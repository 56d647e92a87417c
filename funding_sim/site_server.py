"""
Static Site Server
Maps URL paths to pre-built HTML/asset files, rewrites Next.js image URLs
and serves the historical funding simulator page + JSON API
"""

import asyncio
import os
import re
from pathlib import Path
from urllib.parse import unquote

import orjson
from aiohttp import web

from .catalog import DEFAULT_ASSET, DEFAULT_RANGE, EXCHANGES, RANGES, color_for, is_known_exchange
from .dashboard import DashboardGenerator
from .series import INTERVAL_MS, coerce_seed, generate_data, resolve_time_range, system_clock, to_json
from .simulator import FundingSimulator

PROJECT_ROOT = Path(__file__).parent.parent

DEFAULT_HOST = '127.0.0.1'
DEFAULT_PORT = 3001

MIME_TYPES = {
    '.html': 'text/html',
    '.js': 'application/javascript',
    '.css': 'text/css',
    '.json': 'application/json',
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.webp': 'image/webp',
    '.ico': 'image/x-icon',
    '.woff': 'font/woff',
    '.woff2': 'font/woff2',
    '.ttf': 'font/ttf',
    '.eot': 'application/vnd.ms-fontobject',
}

# Pretty URLs of the static export
ROUTE_MAP = {
    '/': 'index.html',
    '/api-docs': 'api-docs.html',
    '/charts': 'charts.html',
    '/backtester': 'backtester.html',
}

IMAGE_URL_RE = re.compile(r'/([^/]+)\.(png|jpg|jpeg|webp)$', re.IGNORECASE)
IMAGE_CACHE_CONTROL = 'public, max-age=31536000, immutable'

# JSON integers are emitted as signed 64-bit
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def json_dumps(data) -> str:
    return orjson.dumps(data, option=orjson.OPT_SERIALIZE_NUMPY).decode('utf-8')


def json_response(data, status: int = 200, headers=None) -> web.Response:
    return web.Response(text=json_dumps(data), status=status,
                        content_type='application/json', headers=headers)


def get_content_type(file_path: str) -> str:
    return MIME_TYPES.get(Path(file_path).suffix.lower(), 'application/octet-stream')


def image_asset_name(image_url: str):
    """'/images/exchanges/Aster.png' -> 'assets/aster.webp', or None if not an image URL"""
    match = IMAGE_URL_RE.search(image_url)
    if not match:
        return None
    return f"assets/{match.group(1).lower()}.webp"


def not_found_page(title: str, detail: str) -> web.Response:
    return web.Response(
        text=f"<h1>404 - {title}</h1><p>{detail}</p>",
        status=404,
        content_type='text/html',
    )


class SiteServer:
    """HTTP server for the static export plus the funding simulator"""

    def __init__(self, host=DEFAULT_HOST, port=DEFAULT_PORT, site_root=None,
                 clock=system_clock):
        self.host = host
        self.port = port
        self.site_root = Path(site_root or PROJECT_ROOT / 'site').resolve()
        self.clock = clock
        self.dashboard = DashboardGenerator()
        self.running = False

    @classmethod
    def from_env(cls) -> 'SiteServer':
        return cls(
            host=os.environ.get('HOST', DEFAULT_HOST),
            port=int(os.environ.get('PORT', DEFAULT_PORT)),
            site_root=os.environ.get('SITE_ROOT') or None,
        )

    # --- file helpers ---

    def _resolve(self, rel_path: str):
        """Absolute path under site_root, or None if it escapes the root"""
        full = (self.site_root / rel_path.lstrip('/')).resolve()
        try:
            full.relative_to(self.site_root)
        except ValueError:
            return None
        return full

    def _is_file(self, rel_path: str) -> bool:
        full = self._resolve(rel_path)
        return full is not None and full.is_file()

    def serve_file(self, rel_path: str) -> web.StreamResponse:
        full = self._resolve(rel_path)
        if full is None or not full.is_file() or not os.access(full, os.R_OK):
            print(f"[404] Error serving file {rel_path}")
            return not_found_page('File Not Found', f"Requested: {rel_path}")
        return web.FileResponse(full, headers={'Content-Type': get_content_type(rel_path)})

    # --- handlers ---

    async def site_handler(self, request: web.Request) -> web.StreamResponse:
        """Catch-all router for the static export"""
        pathname = request.path
        print(f"[HTTP] {request.method} {pathname}")

        if pathname != '/' and pathname.endswith('/'):
            pathname = pathname[:-1]

        if pathname == '/_next/image' and request.query.get('url'):
            image_url = unquote(request.query['url'])
            asset_path = image_asset_name(image_url)
            if asset_path:
                if self._is_file(asset_path):
                    print(f"[IMAGE] {image_url} -> /{asset_path}")
                    return self.serve_file(asset_path)
                print(f"[IMAGE] Asset not found: {asset_path}, original: {image_url}")
                return not_found_page('Image Not Found', f"Asset: {asset_path}")

        if pathname.startswith('/_next/') or pathname.startswith('/assets/') or '.' in pathname:
            return self.serve_file(pathname[1:])

        if pathname == self.dashboard.page_path:
            return await self.funding_page_handler(request)

        if pathname in ROUTE_MAP:
            return self.serve_file(ROUTE_MAP[pathname])

        file_path = 'index.html' if pathname == '/' else pathname[1:]
        if self._is_file(file_path):
            return self.serve_file(file_path)
        if self._is_file(file_path + '.html'):
            return self.serve_file(file_path + '.html')

        # Client-side routing fallback
        print(f"[HTTP] Route not found: {pathname}, serving index.html")
        return self.serve_file('index.html')

    async def image_api_handler(self, request: web.Request) -> web.Response:
        """JSON-flavoured image rewrite endpoint"""
        url = request.query.get('url')
        if not url:
            return json_response({'error': 'Missing url parameter'}, status=400)

        image_url = unquote(url)
        asset_path = image_asset_name(image_url)
        if not asset_path:
            return json_response({'error': 'Invalid image URL format'}, status=400)

        full = self._resolve(asset_path)
        if full is None or not full.is_file():
            print(f"[IMAGE] Asset not found: {asset_path}, original: {image_url}")
            return json_response({'error': 'Image not found'}, status=404)

        return web.FileResponse(full, headers={
            'Content-Type': 'image/webp',
            'Cache-Control': IMAGE_CACHE_CONTROL,
        })

    def _simulator_from_query(self, query) -> FundingSimulator:
        range_key = query.get('range', DEFAULT_RANGE)
        if range_key not in RANGES:
            range_key = DEFAULT_RANGE
        sim = FundingSimulator(
            clock=self.clock,
            asset=query.get('asset') or DEFAULT_ASSET,
            range_key=range_key,
            random_seed=coerce_seed(query.get('seed')),
        )
        hidden = [e for e in query.get('hidden', '').split(',') if is_known_exchange(e)]
        sim.visibility.hide(hidden)
        # Unchecked checkbox only sends the hidden "0" field, so the last value wins
        flags = query.getall('simulated', [])
        if flags:
            sim.simulated = flags[-1].lower() not in ('0', 'false', 'off')
        return sim

    async def funding_page_handler(self, request: web.Request) -> web.Response:
        sim = self._simulator_from_query(request.query)
        sim.refresh()
        return web.Response(text=self.dashboard.generate(sim), content_type='text/html')

    async def funding_api_handler(self, request: web.Request) -> web.Response:
        """Synthetic series as JSON"""
        query = request.query
        asset = query.get('asset') or DEFAULT_ASSET
        range_key = query.get('range', DEFAULT_RANGE)
        seed = coerce_seed(query.get('seed'))
        end = query.get('end')

        try:
            now_ms = int(end) if end else None
            start, end_ms = resolve_time_range(range_key, now_ms, clock=self.clock)
        except ValueError as e:
            return json_response({'error': str(e)}, status=400)

        if not all(INT64_MIN <= v <= INT64_MAX for v in (start, end_ms, seed)):
            return json_response({'error': 'Value out of range'}, status=400)

        points = generate_data(asset, start, end_ms, seed)
        return json_response({
            'asset': asset,
            'range': range_key,
            'start': start,
            'end': end_ms,
            'interval': INTERVAL_MS,
            'seed': seed,
            'exchanges': list(EXCHANGES),
            'colors': {e: color_for(e) for e in EXCHANGES},
            'points': to_json(points),
        })

    # --- lifecycle ---

    def make_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/api/image', self.image_api_handler)
        app.router.add_get('/api/funding/historical', self.funding_api_handler)
        app.router.add_get('/{tail:.*}', self.site_handler)
        return app

    async def run(self):
        """Start the server and block until stopped"""
        runner = web.AppRunner(self.make_app())
        await runner.setup()
        site = web.TCPSite(runner, self.host, self.port)
        await site.start()

        print(f"[SERVER] Server running at http://{self.host}:{self.port}/")
        print(f"[SERVER] Site root: {self.site_root}")
        print("[SERVER] Press Ctrl+C to stop the server")

        self.running = True
        try:
            while self.running:
                await asyncio.sleep(1)
        finally:
            self.running = False
            await runner.cleanup()
            print("[OK] Shutdown complete")


async def main():
    server = SiteServer.from_env()
    await server.run()


if __name__ == '__main__':
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
