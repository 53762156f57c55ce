"""
Error types
User-visible command errors and fatal lookup failures
"""

from typing import Optional


class CommandError(Exception):
    """A failure the user caused or can act on; replied to, never logged as a crash."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PermissionDenied(CommandError):
    """The invoking member lacks a capability the command needs."""

    def __init__(self, message: str = "You do not have permission to update the default version!"):
        super().__init__(message)


class InvalidVersion(CommandError):
    """A version given to the default-version flag is neither known nor ``latest``."""

    def __init__(self, version: str):
        super().__init__("Invalid version.")
        self.version = version


class UnknownVersion(CommandError):
    """The mapping database has no data for the requested version."""

    def __init__(self, version: str):
        super().__init__(f"No such version: `{version}`")
        self.version = version


class MissingArgument(CommandError):
    def __init__(self, argument: str):
        super().__init__(f"Missing required argument: `{argument}`")
        self.argument = argument


class UnknownFlag(CommandError):
    def __init__(self, flag: str):
        super().__init__(f"Unknown flag: `{flag}`")
        self.flag = flag


class LookupFailure(Exception):
    """
    The lookup task failed or was interrupted while being awaited.

    Fatal for the invocation that hit it. Nothing retries it.
    """

    def __init__(self, name: str, version: str, cause: Optional[BaseException] = None):
        detail = f": {cause!r}" if cause is not None else ""
        super().__init__(f"Lookup of `{name}` for {version} failed{detail}")
        self.name = name
        self.version = version
        self.cause = cause
