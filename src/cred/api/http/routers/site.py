"""Root HTML layout for the web frontend shell."""

from html import escape

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from src.cred.runtime.context import get_config

router = APIRouter(tags=["site"])

_LAYOUT = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{title}</title>
    <meta name="description" content="{description}" />
  </head>
  <body>
    <div id="root"></div>
  </body>
</html>
"""


def render_layout(title: str, description: str) -> str:
    return _LAYOUT.format(title=escape(title), description=escape(description))


@router.get("/", response_class=HTMLResponse, include_in_schema=False)
async def root_layout() -> HTMLResponse:
    cfg = get_config().app
    return HTMLResponse(render_layout(cfg.title, cfg.description))
