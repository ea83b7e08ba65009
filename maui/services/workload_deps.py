"""Dependencies declared by installed workloads.

Each platform workload ships a `WorkloadDependencies.json` beside its manifest
in `<dotnet root>/sdk-manifests/<band>/<workload>/<version>/`. It names the JDK,
Xcode and Android SDK packages that workload was built against. These are
reported as extra detail on verbose workload records; nothing here affects a
record's status.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from maui.core.structured import as_obj_list, as_str_dict, get_bool, get_str, get_table, lookup
from maui.platform.detection import Arch, Platform, PlatformInfo, detect
from maui.services.checkers.common import CommandRunner, DefaultCommandRunner, TargetPlatform

__all__ = [
    "AndroidSdkPackage",
    "WorkloadDependencyInfo",
    "WorkloadDependencyReader",
]

logger = logging.getLogger(__name__)

DEPENDENCIES_FILE = "WorkloadDependencies.json"

_TARGET_WORKLOADS: Mapping[TargetPlatform, str | None] = {
    TargetPlatform.ANDROID: "microsoft.net.sdk.android",
    TargetPlatform.IOS: "microsoft.net.sdk.ios",
    TargetPlatform.MACCATALYST: "microsoft.net.sdk.maccatalyst",
    # WinUI ships no dependency file.
    TargetPlatform.WINDOWS: None,
}


@dataclass(frozen=True, slots=True)
class AndroidSdkPackage:
    id: str
    description: str
    recommended_version: str | None = None
    optional: bool = False


@dataclass(frozen=True, slots=True)
class WorkloadDependencyInfo:
    """What one workload says it needs."""

    workload_name: str
    alias: str | None = None
    version: str | None = None
    xcode_version: str | None = None
    xcode_recommended_version: str | None = None
    sdk_version: str | None = None
    jdk_version: str | None = None
    jdk_recommended_version: str | None = None
    android_sdk_packages: tuple[AndroidSdkPackage, ...] = ()

    def detail_pairs(self) -> dict[str, str]:
        """Non-empty fields as verbose detail entries."""
        pairs = {
            "DependencyVersion": self.version,
            "RequiredXcode": self.xcode_version,
            "RecommendedXcode": self.xcode_recommended_version,
            "PlatformSdk": self.sdk_version,
            "RequiredJdk": self.jdk_version,
            "RecommendedJdk": self.jdk_recommended_version,
        }
        details = {k: v for k, v in pairs.items() if v}
        required = [p.id for p in self.android_sdk_packages if not p.optional]
        if required:
            details["AndroidSdkPackages"] = ", ".join(required)
        return details


def feature_bands(sdk_version: str) -> list[str]:
    """Candidate `sdk-manifests` band directories for an SDK version.

    `9.0.203` -> `9.0.203`, `9.0.100`, `9.0.100-rc.2`, `9.0.100-rc.1`,
    `9.0.100-preview.7`. Versions with fewer than three parts have no band.
    """
    parts = sdk_version.strip().split(".")
    if len(parts) < 3:
        return []
    major_minor = f"{parts[0]}.{parts[1]}"
    patch = parts[2].split("-")[0]
    return [
        f"{major_minor}.{patch}",
        f"{major_minor}.100",
        f"{major_minor}.100-rc.2",
        f"{major_minor}.100-rc.1",
        f"{major_minor}.100-preview.7",
    ]


def _host_rid(host: PlatformInfo) -> str:
    match host.platform:
        case Platform.WINDOWS:
            return "win-x64"
        case Platform.MACOS:
            return "mac-arm64" if host.arch == Arch.ARM64 else "mac-x64"
        case Platform.LINUX | Platform.UNKNOWN:
            return "linux-x64"


def _android_package(item: object, host: PlatformInfo) -> AndroidSdkPackage | None:
    table = as_str_dict(item)
    if table is None:
        return None
    sdk_package = get_table(table, "sdkPackage")
    if sdk_package is None:
        return None

    raw_id = lookup(sdk_package, "id")
    package_id: str | None = None
    if isinstance(raw_id, str):
        package_id = raw_id
    else:
        per_host = as_str_dict(raw_id)
        if per_host is not None:
            package_id = get_str(per_host, _host_rid(host))
    if not package_id:
        return None

    return AndroidSdkPackage(
        id=package_id,
        description=get_str(table, "desc") or package_id,
        recommended_version=get_str(sdk_package, "recommendedVersion"),
        optional=get_bool(table, "optional"),
    )


def parse_dependencies(
    workload_name: str, data: object, host: PlatformInfo
) -> WorkloadDependencyInfo | None:
    """Parse a `WorkloadDependencies.json` document.

    The document has a single top-level key (the workload manifest id) whose
    value holds the `workload`, `xcode`, `jdk`, `androidsdk` and `sdk` sections.
    """
    root = as_str_dict(data)
    if not root:
        return None
    node = as_str_dict(next(iter(root.values())))
    if node is None:
        return None

    alias = None
    version = None
    workload = get_table(node, "workload")
    if workload is not None:
        version = get_str(workload, "version")
        aliases = as_obj_list(lookup(workload, "alias")) or []
        if aliases and isinstance(aliases[0], str):
            alias = aliases[0]

    xcode = get_table(node, "xcode") or {}
    jdk = get_table(node, "jdk") or {}
    sdk = get_table(node, "sdk") or {}
    android_sdk = get_table(node, "androidsdk") or {}

    packages = []
    for item in as_obj_list(lookup(android_sdk, "packages")) or ():
        package = _android_package(item, host)
        if package is not None:
            packages.append(package)

    return WorkloadDependencyInfo(
        workload_name=workload_name,
        alias=alias,
        version=version,
        xcode_version=get_str(xcode, "version"),
        xcode_recommended_version=get_str(xcode, "recommendedVersion"),
        sdk_version=get_str(sdk, "version"),
        jdk_version=get_str(jdk, "version"),
        jdk_recommended_version=get_str(jdk, "recommendedVersion"),
        android_sdk_packages=tuple(packages),
    )


def _default_dotnet_root(platform: Platform) -> Path:
    if platform == Platform.WINDOWS:
        return Path("C:/Program Files/dotnet")
    return Path("/usr/local/share/dotnet")


@dataclass(slots=True)
class WorkloadDependencyReader:
    """Locate and read workload dependency files under the dotnet root.

    Attributes:
        runner: Command runner, used for `dotnet --version` when no SDK version is given
        environ: Environment (DOTNET_ROOT)
        host: Host information (selects per-RID Android package ids)
    """

    runner: CommandRunner = field(default_factory=DefaultCommandRunner)
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    host: PlatformInfo = field(default_factory=detect)
    _sdk_version: str | None = field(default=None, init=False, repr=False)

    def dotnet_root(self) -> Path:
        value = self.environ.get("DOTNET_ROOT", "").strip()
        return Path(value) if value else _default_dotnet_root(self.host.platform)

    def _current_sdk_version(self) -> str | None:
        if self._sdk_version is None:
            try:
                result = self.runner.run("dotnet", ["--version"])
            except OSError:
                return None
            if not result.ok or not result.stdout.strip():
                return None
            self._sdk_version = result.stdout.strip()
        return self._sdk_version

    def manifest_dir(self, workload_name: str, sdk_version: str | None = None) -> Path | None:
        """Newest installed manifest directory for `workload_name`, if any."""
        manifests = self.dotnet_root() / "sdk-manifests"
        if not manifests.is_dir():
            return None

        version = sdk_version or self._current_sdk_version()
        if not version:
            return None

        for band in feature_bands(version):
            band_dir = manifests / band / workload_name.lower()
            if not band_dir.is_dir():
                continue
            try:
                versions = sorted((d for d in band_dir.iterdir() if d.is_dir()), key=lambda d: d.name, reverse=True)
            except OSError as e:
                logger.debug("could not list %s: %s", band_dir, e)
                continue
            if versions:
                return versions[0]
        return None

    def read(self, workload_name: str, sdk_version: str | None = None) -> WorkloadDependencyInfo | None:
        """Dependencies for one workload manifest id; None when unavailable."""
        directory = self.manifest_dir(workload_name, sdk_version)
        if directory is None:
            return None
        path = directory / DEPENDENCIES_FILE
        try:
            data = json.loads(path.read_text(encoding="utf-8-sig"))
        except (OSError, ValueError, RecursionError) as e:
            logger.debug("could not read %s: %s", path, e)
            return None
        return parse_dependencies(workload_name, data, self.host)

    def read_for_target(self, target: TargetPlatform) -> WorkloadDependencyInfo | None:
        workload_name = _TARGET_WORKLOADS[target]
        if workload_name is None:
            return None
        return self.read(workload_name)
