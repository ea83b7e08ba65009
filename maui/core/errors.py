"""Exit codes for CLI commands.

The values are process exit codes and should remain stable:
- 0: Success (warnings and not-applicable checks included)
- 1: At least one check reported an error
- 2: User error (bad input, unknown platform name)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    GENERAL_ERROR = 1
    USER_ERROR = 2

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")
