"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Errors surfaced by a size tree computation. Only problems with the root path
are raised; everything below the root degrades into zero-size nodes.
"""


class TraversalError(Exception):
    """Base error for a failed size tree computation."""

    def __init__(self, path: str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = path


class RootNotFoundError(TraversalError):
    """The root path does not exist."""

    def __init__(self, path: str):
        super().__init__(path, "Path does not exist")


class RootAccessError(TraversalError):
    """The root path exists but could not be stat-ed or listed."""

    def __init__(self, path: str, reason: str = "Cannot read path"):
        super().__init__(path, reason)
