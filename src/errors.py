class UploaderError(Exception):
    """Base class for errors reported back to the MCP client as text."""


class ConfigurationError(UploaderError):
    pass


class NotFoundOrUnreadableError(UploaderError):
    pass


class NotAFileError(UploaderError):
    pass


class UnsupportedTypeError(UploaderError):
    pass


class ReadError(UploaderError):
    pass


class StorageWriteError(UploaderError):
    pass


class SigningError(UploaderError):
    pass


class UnsupportedPlatformError(UploaderError):
    pass


class ClipboardReadError(UploaderError):
    pass
