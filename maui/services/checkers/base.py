"""Base types for checkers."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto


class CheckStatus(Enum):
    """Status of a check result."""

    OK = auto()
    """Component present and recent enough."""

    WARNING = auto()
    """Usable, but not what the manifest recommends."""

    ERROR = auto()
    """Missing or too old; fails the run."""

    NOT_APPLICABLE = auto()
    """The check does not apply to this host."""

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class CheckResult:
    """Result of a single check.

    Attributes:
        name: Component name, unique within a run (e.g. ".NET SDK", "Xcode")
        status: Outcome of the check
        message: Human-readable result message
        recommendation: How to fix it; required for WARNING and ERROR
        details: Extra key/value diagnostics, only filled in verbose mode
    """

    name: str
    status: CheckStatus
    message: str
    recommendation: str | None = None
    details: Mapping[str, str] | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("check result needs a name")
        if not self.message.strip():
            raise ValueError(f"check result {self.name!r} needs a message")
        if self.status in (CheckStatus.WARNING, CheckStatus.ERROR) and not (
            self.recommendation and self.recommendation.strip()
        ):
            raise ValueError(f"{self.status} result {self.name!r} needs a recommendation")

    @property
    def ok(self) -> bool:
        """Return True unless the check failed."""
        return self.status != CheckStatus.ERROR

    @property
    def is_error(self) -> bool:
        return self.status == CheckStatus.ERROR

    @classmethod
    def success(
        cls, name: str, message: str, details: Mapping[str, str] | None = None
    ) -> CheckResult:
        return cls(name=name, status=CheckStatus.OK, message=message, details=details)

    @classmethod
    def warning(
        cls,
        name: str,
        message: str,
        recommendation: str,
        details: Mapping[str, str] | None = None,
    ) -> CheckResult:
        return cls(
            name=name,
            status=CheckStatus.WARNING,
            message=message,
            recommendation=recommendation,
            details=details,
        )

    @classmethod
    def error(
        cls,
        name: str,
        message: str,
        recommendation: str,
        details: Mapping[str, str] | None = None,
    ) -> CheckResult:
        return cls(
            name=name,
            status=CheckStatus.ERROR,
            message=message,
            recommendation=recommendation,
            details=details,
        )

    @classmethod
    def not_applicable(cls, name: str) -> CheckResult:
        return cls(
            name=name,
            status=CheckStatus.NOT_APPLICABLE,
            message="Not applicable on this platform",
        )
