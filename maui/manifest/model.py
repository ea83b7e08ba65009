"""Requirements manifest model.

A manifest is a JSON document with a top-level `check` object describing the
minimum (or exact) toolchain versions a MAUI release expects. Every nested key
is optional, unknown keys are ignored and key names are matched without regard
to case. The model is immutable once built.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from maui.core.structured import (
    StrDict,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_str,
    get_str_list,
    get_str_map,
    get_table,
)

__all__ = [
    "Manifest",
    "CheckConfiguration",
    "OpenJdkRequirement",
    "XcodeRequirement",
    "AndroidPackage",
    "AndroidEmulator",
    "AndroidRequirement",
    "DotNetSdk",
    "DotNetRequirement",
    "WindowsRequirement",
]


def _frozen(d: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType(dict(d or {}))


@dataclass(frozen=True, slots=True)
class OpenJdkRequirement:
    version: str | None = None
    minimum_version: str | None = None
    require_exact: bool = False
    urls: Mapping[str, str] = field(default_factory=lambda: _frozen(None))

    @classmethod
    def from_dict(cls, data: StrDict) -> OpenJdkRequirement:
        return cls(
            version=get_str(data, "version"),
            minimum_version=get_str(data, "minimumVersion"),
            require_exact=get_bool(data, "requireExact"),
            urls=_frozen(get_str_map(data, "urls")),
        )


@dataclass(frozen=True, slots=True)
class XcodeRequirement:
    minimum_version: str | None = None
    minimum_version_name: str | None = None
    exact_version: str | None = None
    exact_version_name: str | None = None

    @classmethod
    def from_dict(cls, data: StrDict) -> XcodeRequirement:
        return cls(
            minimum_version=get_str(data, "minimumVersion"),
            minimum_version_name=get_str(data, "minimumVersionName"),
            exact_version=get_str(data, "exactVersion"),
            exact_version_name=get_str(data, "exactVersionName"),
        )


@dataclass(frozen=True, slots=True)
class AndroidPackage:
    """An SDK manager package (`platforms;android-34`, `build-tools;34.0.0`)."""

    path: str
    version: str
    arch: str | None = None
    alternatives: tuple[AndroidPackage, ...] = ()

    @classmethod
    def from_dict(cls, data: StrDict) -> AndroidPackage | None:
        path = get_str(data, "path")
        version = get_str(data, "version")
        if path is None or version is None:
            return None
        return cls(
            path=path,
            version=version,
            arch=get_str(data, "arch"),
            alternatives=_packages(get_list(data, "alternatives")),
        )


def _packages(items: list[object] | None) -> tuple[AndroidPackage, ...]:
    out: list[AndroidPackage] = []
    for item in items or ():
        table = as_str_dict(item)
        if table is None:
            continue
        package = AndroidPackage.from_dict(table)
        if package is not None:
            out.append(package)
    return tuple(out)


@dataclass(frozen=True, slots=True)
class AndroidEmulator:
    sdk_id: str | None = None
    alternate_sdk_ids: tuple[str, ...] = ()
    description: str | None = None
    api_level: int = 0
    tag: str | None = None
    device: str | None = None

    @classmethod
    def from_dict(cls, data: StrDict) -> AndroidEmulator:
        return cls(
            sdk_id=get_str(data, "sdkId"),
            alternate_sdk_ids=get_str_list(data, "alternateSdkIds"),
            description=get_str(data, "desc"),
            api_level=get_int(data, "apiLevel") or 0,
            tag=get_str(data, "tag"),
            device=get_str(data, "device"),
        )


@dataclass(frozen=True, slots=True)
class AndroidRequirement:
    packages: tuple[AndroidPackage, ...] = ()
    emulators: tuple[AndroidEmulator, ...] = ()

    @classmethod
    def from_dict(cls, data: StrDict) -> AndroidRequirement:
        emulators = [
            AndroidEmulator.from_dict(t)
            for t in (as_str_dict(e) for e in get_list(data, "emulators") or ())
            if t is not None
        ]
        return cls(packages=_packages(get_list(data, "packages")), emulators=tuple(emulators))


@dataclass(frozen=True, slots=True)
class DotNetSdk:
    version: str | None = None
    require_exact: bool = False
    urls: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    package_sources: tuple[str, ...] = ()
    workload_rollback: str | None = None
    workload_ids: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: StrDict) -> DotNetSdk:
        return cls(
            version=get_str(data, "version"),
            require_exact=get_bool(data, "requireExact"),
            urls=_frozen(get_str_map(data, "urls")),
            package_sources=get_str_list(data, "packageSources"),
            workload_rollback=get_str(data, "workloadRollback"),
            workload_ids=get_str_list(data, "workloadIds"),
        )


@dataclass(frozen=True, slots=True)
class DotNetRequirement:
    sdks: tuple[DotNetSdk, ...] = ()

    @classmethod
    def from_dict(cls, data: StrDict) -> DotNetRequirement:
        sdks = [
            DotNetSdk.from_dict(t)
            for t in (as_str_dict(s) for s in get_list(data, "sdks") or ())
            if t is not None
        ]
        return cls(sdks=tuple(sdks))


@dataclass(frozen=True, slots=True)
class WindowsRequirement:
    """Visual Studio (Windows toolchain) version requirement."""

    minimum_version: str | None = None
    exact_version: str | None = None
    exact_version_name: str | None = None

    @classmethod
    def from_dict(cls, data: StrDict) -> WindowsRequirement:
        return cls(
            minimum_version=get_str(data, "minimumVersion"),
            exact_version=get_str(data, "exactVersion"),
            exact_version_name=get_str(data, "exactVersionName"),
        )


@dataclass(frozen=True, slots=True)
class CheckConfiguration:
    tool_version: str | None = None
    variables: Mapping[str, str] = field(default_factory=lambda: _frozen(None))
    openjdk: OpenJdkRequirement | None = None
    xcode: XcodeRequirement | None = None
    android: AndroidRequirement | None = None
    dotnet: DotNetRequirement | None = None
    vswin: WindowsRequirement | None = None

    @classmethod
    def from_dict(cls, data: StrDict) -> CheckConfiguration:
        openjdk = get_table(data, "openjdk")
        xcode = get_table(data, "xcode")
        android = get_table(data, "android")
        dotnet = get_table(data, "dotnet")
        vswin = get_table(data, "vswin")
        return cls(
            tool_version=get_str(data, "toolVersion"),
            variables=_frozen(get_str_map(data, "variables")),
            openjdk=OpenJdkRequirement.from_dict(openjdk) if openjdk is not None else None,
            xcode=XcodeRequirement.from_dict(xcode) if xcode is not None else None,
            android=AndroidRequirement.from_dict(android) if android is not None else None,
            dotnet=DotNetRequirement.from_dict(dotnet) if dotnet is not None else None,
            vswin=WindowsRequirement.from_dict(vswin) if vswin is not None else None,
        )


@dataclass(frozen=True, slots=True)
class Manifest:
    """Root of a requirements manifest."""

    check: CheckConfiguration | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Manifest:
        check = get_table(data, "check")
        return cls(check=CheckConfiguration.from_dict(check) if check is not None else None)

    @property
    def variables(self) -> Mapping[str, str]:
        if self.check is None:
            return _frozen(None)
        return self.check.variables

    def variable(self, name: str) -> str | None:
        """Look up a manifest variable, ignoring case."""
        return get_str(self.variables, name)

    def int_variable(self, name: str, default: int) -> int:
        """Integer manifest variable, or `default` when absent or not a number."""
        value = get_int(self.variables, name)
        return default if value is None else value
