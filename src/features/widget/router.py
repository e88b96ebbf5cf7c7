"""Widget configuration and embed loader endpoints."""

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from .embed import generate_embed_script
from .models import WidgetConfig, WidgetConfigResponse

router = APIRouter(tags=["widget"])


@router.get("/api/widget/config", response_model=WidgetConfigResponse)
async def get_default_widget_config():
    """Widget display config when no config id is given."""
    return WidgetConfigResponse(config=WidgetConfig(), config_id="default")


@router.get("/api/widget/config/{config_id}", response_model=WidgetConfigResponse)
async def get_widget_config(config_id: str):
    """
    Public endpoint to get widget display config.

    The config id is echoed back; every id currently gets the default config.
    """
    return WidgetConfigResponse(config=WidgetConfig(), config_id=config_id)


@router.get("/embed.js", include_in_schema=False)
async def embed_script(request: Request, config: str = Query(default="default")):
    """Serve the loader script that host pages include with a <script> tag."""
    server_url = str(request.base_url).rstrip("/")
    return Response(
        content=generate_embed_script(config_id=config, server_url=server_url),
        media_type="application/javascript",
    )
