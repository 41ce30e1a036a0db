"""Errors raised while preparing a machine for execution."""


class ROMLoadError(Exception):
    """A program image could not be loaded into memory."""


class ROMNotFoundError(ROMLoadError, FileNotFoundError):
    """The ROM file does not exist or cannot be opened."""

    def __init__(self, path: str):
        super().__init__(f"ROM file '{path}' is invalid or does not exist")
        self.path = path


class ROMTooLargeError(ROMLoadError, ValueError):
    """The program image does not fit between the entry point and the end of memory."""

    def __init__(self, size: int, max_size: int, name: str = "program"):
        super().__init__(
            f"{name} is too big! Size: {size} bytes, max size allowed: {max_size} bytes"
        )
        self.size = size
        self.max_size = max_size
