"""Installed workload parsing and checks.

`dotnet workload list` output changed across SDK versions: newer SDKs accept
`--format json`, older ones only print a column-aligned table. Both shapes
parse into the same `InstalledWorkload` records; JSON is preferred and the
table is the fallback when the JSON probe fails or yields nothing.

Workload ids also changed: .NET 9 and earlier ship `maui-android`,
`maui-ios`, ...; .NET 10 ships `android`, `ios`, `maccatalyst`. Each target
therefore has a list of aliases, newest first.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from maui.core.structured import as_obj_list, as_str_dict, get_str, lookup
from maui.services.checkers.base import CheckResult
from maui.services.checkers.common import CommandRunner, DefaultCommandRunner, TargetPlatform

if TYPE_CHECKING:
    from maui.services.workload_deps import WorkloadDependencyReader

__all__ = [
    "InstalledWorkload",
    "WorkloadSet",
    "WorkloadQuery",
    "WorkloadChecker",
    "WORKLOAD_ALIASES",
    "parse_workloads_json",
    "parse_workloads_text",
    "query_installed_workloads",
]

logger = logging.getLogger(__name__)

GROUP_NAME = "MAUI Workloads"
BASE_WORKLOAD = "maui"
LEGACY_PREFIX = "maui-"

WORKLOAD_ALIASES: Mapping[TargetPlatform, tuple[str, ...]] = {
    TargetPlatform.ANDROID: ("android", "maui-android"),
    TargetPlatform.IOS: ("ios", "maui-ios"),
    TargetPlatform.MACCATALYST: ("maccatalyst", "maui-maccatalyst"),
    TargetPlatform.WINDOWS: ("maui-windows", "windows"),
}


@dataclass(frozen=True, slots=True)
class InstalledWorkload:
    id: str
    version: str = "unknown"
    manifest_version: str | None = None
    description: str | None = None


class WorkloadSet(Mapping[str, InstalledWorkload]):
    """Installed workloads keyed by id, ignoring case.

    Adding an id that is already present replaces the earlier record.
    """

    def __init__(self, workloads: list[InstalledWorkload] | None = None) -> None:
        self._items: dict[str, InstalledWorkload] = {}
        for workload in workloads or ():
            self.add(workload)

    def add(self, workload: InstalledWorkload) -> None:
        self._items[workload.id.casefold()] = workload

    def __getitem__(self, key: str) -> InstalledWorkload:
        return self._items[key.casefold()]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._items

    def __iter__(self) -> Iterator[str]:
        return (w.id for w in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"WorkloadSet({list(self)!r})"

    def find(self, aliases: tuple[str, ...]) -> tuple[str, InstalledWorkload] | None:
        """First alias that is installed, with its record."""
        for alias in aliases:
            workload = self._items.get(alias.casefold())
            if workload is not None:
                return alias, workload
        return None

    def has_base_workload(self) -> bool:
        return any(k == BASE_WORKLOAD or k.startswith(LEGACY_PREFIX) for k in self._items)


def _workload_from_json(item: object) -> InstalledWorkload | None:
    table = as_str_dict(item)
    if table is None:
        return None
    workload_id = lookup(table, "id")
    if not isinstance(workload_id, str) or not workload_id.strip():
        return None
    return InstalledWorkload(
        id=workload_id.strip(),
        version=get_str(table, "version") or "unknown",
        manifest_version=get_str(table, "manifestVersion"),
        description=get_str(table, "description"),
    )


def parse_workloads_json(raw: str) -> WorkloadSet:
    """Parse `dotnet workload list --format json`.

    Accepts `{"installed": [...]}` or a bare array. Malformed input gives an
    empty set.
    """
    workloads = WorkloadSet()
    try:
        data: object = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return workloads

    table = as_str_dict(data)
    items = as_obj_list(lookup(table, "installed")) if table is not None else as_obj_list(data)
    for item in items or ():
        workload = _workload_from_json(item)
        if workload is not None:
            workloads.add(workload)
    return workloads


_HEADER_MARKERS = ("installed workload", "workload id", "manifest version")
_INFO_MARKERS = ("use `dotnet workload search`", "available workloads", "no workloads installed")
_COLUMN_SPLIT = re.compile(r"\s{2,}")


def _is_header(line: str) -> bool:
    lowered = line.lower()
    if "---" in line or any(m in lowered for m in _HEADER_MARKERS):
        return True
    return all(c in "- " for c in line)


def _is_footer(first_token: str) -> bool:
    lowered = first_token.lower()
    return lowered.startswith("use ") or "update" in lowered or "available" in lowered


def parse_workloads_text(raw: str) -> WorkloadSet:
    """Parse the column-aligned table printed by `dotnet workload list`.

    Rows are only read after a header or separator line; columns are split on
    runs of two or more spaces (id, version, manifest version).
    """
    workloads = WorkloadSet()
    in_section = False

    for raw_line in raw.splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if _is_header(line):
            in_section = True
            continue
        if any(m in line.lower() for m in _INFO_MARKERS):
            continue
        if not in_section:
            continue

        parts = [p.strip() for p in _COLUMN_SPLIT.split(line) if p.strip()]
        if not parts or _is_footer(parts[0]):
            continue
        workloads.add(
            InstalledWorkload(
                id=parts[0],
                version=parts[1] if len(parts) > 1 else "unknown",
                manifest_version=parts[2] if len(parts) > 2 else None,
            )
        )

    return workloads


@dataclass(frozen=True, slots=True)
class WorkloadQuery:
    """Installed workloads plus where they came from.

    `source` is "json" or "text"; `failed` is set when neither probe worked.
    """

    workloads: WorkloadSet
    source: str
    failed: bool = False
    error: str = ""

    def describe(self) -> str:
        ids = ", ".join(self.workloads)
        return f"Found {len(self.workloads)} workloads via {self.source}: {ids}"


def query_installed_workloads(runner: CommandRunner) -> WorkloadQuery:
    """Ask the SDK for installed workloads, preferring JSON output.

    Raises:
        OSError: `dotnet` could not be started.
    """
    json_probe = runner.run("dotnet", ["workload", "list", "--format", "json"])
    if json_probe.ok and json_probe.stdout.strip():
        workloads = parse_workloads_json(json_probe.stdout)
        if workloads:
            return WorkloadQuery(workloads=workloads, source="json")
        logger.debug("workload JSON output had no entries, falling back to text")

    text_probe = runner.run("dotnet", ["workload", "list"])
    if not text_probe.ok:
        return WorkloadQuery(
            workloads=WorkloadSet(),
            source="text",
            failed=True,
            error=text_probe.stderr.strip() or "Unknown error",
        )
    return WorkloadQuery(workloads=parse_workloads_text(text_probe.stdout), source="text")


@dataclass(frozen=True, slots=True)
class WorkloadChecker:
    """Check that a workload is installed for each target platform.

    Attributes:
        runner: Command runner for `dotnet workload list`
        deps: Optional reader for SDK-declared workload dependencies (verbose only)
    """

    runner: CommandRunner = field(default_factory=DefaultCommandRunner)
    deps: WorkloadDependencyReader | None = None

    def check(self, targets: tuple[TargetPlatform, ...], verbose: bool = False) -> list[CheckResult]:
        try:
            query = query_installed_workloads(self.runner)
        except OSError as e:
            return [
                CheckResult.error(GROUP_NAME, "Could not check workloads", f"Error: {e}")
            ]

        if query.failed:
            return [
                CheckResult.error(
                    GROUP_NAME,
                    "Could not query workloads",
                    "Ensure .NET SDK is properly installed",
                    {"Error": query.error} if verbose else None,
                )
            ]

        results = [self._check_target(t, query, verbose) for t in targets]

        if not query.workloads.has_base_workload():
            results.append(
                CheckResult.error(
                    GROUP_NAME,
                    "No MAUI workloads installed",
                    f"Run: dotnet workload install {BASE_WORKLOAD}",
                )
            )
        return results

    def _check_target(
        self, target: TargetPlatform, query: WorkloadQuery, verbose: bool
    ) -> CheckResult:
        name = f"MAUI Workload ({target.display_name})"
        aliases = WORKLOAD_ALIASES[target]
        found = query.workloads.find(aliases)

        if found is None:
            details = None
            if verbose:
                details = {
                    "ExpectedWorkloadIds": " or ".join(aliases),
                    "InstalledWorkloads": ", ".join(query.workloads),
                    "Debug": query.describe(),
                }
            return CheckResult.error(
                name,
                "Not installed",
                f"Run: dotnet workload install {aliases[0]}",
                details,
            )

        workload_id, workload = found
        if verbose and workload.manifest_version:
            message = f"Installed (version {workload.version}, manifest {workload.manifest_version})"
        else:
            message = f"Installed (version {workload.version})"

        details = None
        if verbose:
            details = {
                "WorkloadId": workload_id,
                "Version": workload.version,
                "ManifestVersion": workload.manifest_version or "N/A",
                "Description": workload.description or "N/A",
                "Source": query.source,
                "Debug": query.describe(),
            }
            details.update(self._dependency_details(target))
        return CheckResult.success(name, message, details)

    def _dependency_details(self, target: TargetPlatform) -> dict[str, str]:
        if self.deps is None:
            return {}
        info = self.deps.read_for_target(target)
        return info.detail_pairs() if info is not None else {}
