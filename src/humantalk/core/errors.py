from __future__ import annotations


class HumantalkError(RuntimeError):
    """Base class for humantalk errors."""

    code = "HUMANTALK_ERROR"

    def __init__(self, message: str, *, user_message: str | None = None) -> None:
        super().__init__(message)
        self.user_message = user_message or message


class ConfigurationError(HumantalkError):
    code = "CONFIG_ERROR"


class SinkWriteError(HumantalkError):
    code = "SINK_WRITE_ERROR"

    def __init__(self, message: str, *, user_message: str | None = None, capture=None) -> None:
        super().__init__(message, user_message=user_message)
        # Set by the router when the failed message was FATAL
        self.capture = capture


class ReportPersistError(HumantalkError):
    """The crash artifact could not be saved; the report itself is still valid."""

    code = "REPORT_PERSIST_ERROR"

    def __init__(self, message: str, *, path: str | None = None, user_message: str | None = None) -> None:
        super().__init__(message, user_message=user_message)
        self.path = path
