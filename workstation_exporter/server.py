"""
HTTP endpoint serving the exposition.

Each GET /metrics runs one collection cycle. A failure that escapes the
aggregator turns that single response into a 500; the server keeps
running.
"""

from aiohttp import web

from .aggregator import Aggregator
from .const import APP_NAME, APP_VERSION
from .exposition import CONTENT_TYPE
from .logging import get_logger


logger = get_logger("server")

AGGREGATOR_KEY = web.AppKey("aggregator", Aggregator)

LANDING_PAGE = f"""{APP_NAME} {APP_VERSION}

Metrics are served at /metrics
"""


async def handle_metrics(request: web.Request) -> web.Response:
    aggregator = request.app[AGGREGATOR_KEY]
    try:
        body = await aggregator.collect_cycle()
    except Exception as e:
        logger.error(f"Collection cycle failed: {e}", exc_info=True)
        return web.json_response({"error": str(e)}, status=500)

    return web.Response(body=body.encode("utf-8"), headers={"Content-Type": CONTENT_TYPE})


async def handle_index(request: web.Request) -> web.Response:
    return web.Response(text=LANDING_PAGE)


def create_app(aggregator: Aggregator) -> web.Application:
    """Build the aiohttp application around an aggregator."""
    app = web.Application()
    app[AGGREGATOR_KEY] = aggregator
    app.router.add_get("/", handle_index)
    app.router.add_get("/metrics", handle_metrics)
    return app
