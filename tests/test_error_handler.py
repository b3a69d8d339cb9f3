import logging

from mcp.types import TextContent

from src.errors import ClipboardReadError, NotFoundOrUnreadableError
from src.tools._error_handler import handle_errors


class TestHandleErrors:
    async def test_success_passes_through(self):
        @handle_errors
        async def ok_tool():
            return [TextContent(type="text", text="https://example.com/x.png")]

        result = await ok_tool()
        assert result[0].text == "https://example.com/x.png"

    async def test_uploader_error_becomes_error_text(self):
        @handle_errors
        async def failing_tool():
            raise NotFoundOrUnreadableError("File not found or unreadable: /tmp/x.png")

        result = await failing_tool()
        assert len(result) == 1
        assert result[0].type == "text"
        assert result[0].text == "ERROR: File not found or unreadable: /tmp/x.png"

    async def test_multiline_message_is_kept(self):
        @handle_errors
        async def failing_tool():
            raise ClipboardReadError("Failed to read clipboard image.\n- hint")

        result = await failing_tool()
        assert result[0].text == "ERROR: Failed to read clipboard image.\n- hint"

    async def test_unexpected_error_is_caught_and_logged(self, caplog):
        @handle_errors
        async def failing_tool():
            raise RuntimeError("boom")

        with caplog.at_level(logging.ERROR):
            result = await failing_tool()
        assert result[0].text == "ERROR: boom"
        assert "failing_tool failed unexpectedly" in caplog.text

    async def test_error_without_message_uses_type_name(self):
        @handle_errors
        async def failing_tool():
            raise KeyError()

        result = await failing_tool()
        assert result[0].text == "ERROR: KeyError"

    def test_preserves_signature_metadata(self):
        async def upload_image(path: str) -> list:
            """Docstring."""

        wrapped = handle_errors(upload_image)
        assert wrapped.__name__ == "upload_image"
        assert wrapped.__doc__ == "Docstring."
