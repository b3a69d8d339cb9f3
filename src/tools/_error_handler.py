import functools
import logging

from mcp.types import TextContent

from src.errors import UploaderError

logger = logging.getLogger(__name__)


def error_response(message: str) -> list[TextContent]:
    return [TextContent(type="text", text=f"ERROR: {message}")]


def handle_errors(func):
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except UploaderError as e:
            logger.warning(f"{func.__name__} failed: {e}")
            return error_response(str(e))
        except Exception as e:
            logger.exception(f"{func.__name__} failed unexpectedly")
            return error_response(str(e) or type(e).__name__)

    return wrapper
