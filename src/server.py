import contextlib
import logging
import sys

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.server import TransportSecuritySettings
from starlette.applications import Starlette
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from src.config import Settings, load_settings
from src.errors import ConfigurationError
from src.services.clipboard import ClipboardCapture, clipboard_for_platform
from src.services.storage import ObjectStore, S3ObjectStore
from src.services.uploader import UploadService
from src.tools import uploads

# stdout は stdio プロトコル専用。ログは必ず stderr へ
logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-s3-uploader"


def _create_service_and_mcp(
    settings: Settings,
    store: ObjectStore | None = None,
    clipboard: ClipboardCapture | None = None,
):
    store = store or S3ObjectStore(bucket=settings.s3_bucket, region=settings.region)
    uploader = UploadService(
        store,
        default_prefix=settings.s3_prefix,
        default_expires_in=settings.url_expires_in,
    )

    mcp = FastMCP(
        SERVER_NAME,
        json_response=True,
        stateless_http=True,
        transport_security=TransportSecuritySettings(
            enable_dns_rebinding_protection=False,
        ),
    )
    uploads.register(mcp, uploader, clipboard or clipboard_for_platform())
    return uploader, mcp


async def health(request):
    return JSONResponse({"status": "ok"})


def create_app(settings: Settings, store: ObjectStore | None = None) -> Starlette:
    _, mcp = _create_service_and_mcp(settings, store=store)

    @contextlib.asynccontextmanager
    async def lifespan(app):
        logger.info(f"{SERVER_NAME} starting on http://{settings.host}:{settings.port}")
        try:
            async with mcp.session_manager.run():
                yield
        finally:
            logger.info(f"{SERVER_NAME} stopped")

    app = Starlette(
        routes=[
            Route("/health", health),
            Mount("/", app=mcp.streamable_http_app()),
        ],
        lifespan=lifespan,
    )

    if settings.mcp_auth_token:
        from src.auth import BearerAuthMiddleware

        app.add_middleware(BearerAuthMiddleware, token=settings.mcp_auth_token)

    return app


def main():
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"[{SERVER_NAME}] {e}")
        sys.exit(1)

    if settings.transport == "stdio":
        _, mcp = _create_service_and_mcp(settings)
        logger.info(
            f"[{SERVER_NAME}] running on stdio "
            f"(region={settings.region}, bucket={settings.s3_bucket}, prefix={settings.s3_prefix})"
        )
        mcp.run(transport="stdio")
    else:
        import uvicorn

        app = create_app(settings)
        uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
