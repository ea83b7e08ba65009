"""Environment checks for .NET MAUI development.

Checkers probe one component family each; `CheckService` runs the ones that
apply to the host and collects their records in a fixed order.
"""

from maui.services.check import CheckReport, CheckService
from maui.services.checkers import (
    CheckResult,
    CheckStatus,
    TargetPlatform,
)
from maui.services.workload_deps import WorkloadDependencyReader

__all__ = [
    # Result types
    "CheckResult",
    "CheckStatus",
    "CheckReport",
    # Reconciler
    "CheckService",
    "TargetPlatform",
    "WorkloadDependencyReader",
]
