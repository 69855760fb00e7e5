"""Extraction exceptions."""


class TsDocError(Exception):
    """Base exception for extraction related errors."""

    pass


class InvalidArgumentError(TsDocError):
    """Exception raised when the file path or variant selector is invalid."""

    pass


class FileAccessError(TsDocError):
    """Exception raised when the source file is missing or unreadable."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"cannot read file '{path}': {reason}")
        self.path = path
        self.reason = reason


class ParseError(TsDocError):
    """Exception raised when a file cannot be parsed as a supported source kind."""

    pass
