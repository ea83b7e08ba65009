"""Android toolchain checker.

Validates the two things an Android build needs outside the workload:
- a JDK, found through JAVA_HOME, recent enough for the manifest
- an Android SDK with platform-tools, build-tools and a platform at or above
  the manifest's minimum API level
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from maui.manifest.loader import DEFAULT_MANIFEST
from maui.manifest.model import AndroidPackage, Manifest
from maui.platform.detection import Platform
from maui.platform.paths import home, local_app_data
from maui.services.checkers.base import CheckResult
from maui.services.checkers.common import (
    DEPENDENCIES_URL,
    CommandRunner,
    DefaultCommandRunner,
    parse_major,
)

JDK_NAME = "Java JDK"
SDK_NAME = "Android SDK"

DEFAULT_JDK_VERSION = "17.0"
OLDEST_USABLE_JDK = 11
DEFAULT_MIN_API = 21
DEFAULT_TARGET_API = 34

REQUIRED_SDK_DIRS = ("platform-tools", "build-tools", "platforms")

_JAVA_VERSION_RE = re.compile(r'version\s+"?(\d+)(?:\.(\d+))?')
_PLATFORM_DIR_RE = re.compile(r"android-(\d+)")


def parse_java_major(output: str) -> int | None:
    """Major version from `java -version` output.

    Legacy `1.8.0_x` style versions report their second component.
    """
    match = _JAVA_VERSION_RE.search(output)
    if not match:
        return None
    major = int(match.group(1))
    if major == 1 and match.group(2):
        return int(match.group(2))
    return major


def platform_api_levels(platforms_dir: Path) -> list[int]:
    """API levels of the `platforms/android-<N>` directories, ascending."""
    levels: list[int] = []
    try:
        entries = list(platforms_dir.iterdir())
    except OSError:
        return levels
    for entry in entries:
        if not entry.is_dir():
            continue
        match = _PLATFORM_DIR_RE.search(entry.name)
        if match:
            levels.append(int(match.group(1)))
    return sorted(levels)


def _package_dir(root: Path, package_path: str) -> Path:
    # "platforms;android-34" -> <root>/platforms/android-34
    return root.joinpath(*package_path.split(";"))


def missing_packages(root: Path, packages: tuple[AndroidPackage, ...]) -> list[str]:
    """Manifest packages with neither their own path nor an alternative on disk."""
    missing: list[str] = []
    for package in packages:
        candidates = (package, *package.alternatives)
        if not any(_package_dir(root, p.path).is_dir() for p in candidates):
            missing.append(package.path)
    return missing


@dataclass(frozen=True, slots=True)
class AndroidChecker:
    """Check the JDK and Android SDK.

    Attributes:
        platform: Host platform (default SDK locations, java executable name)
        manifest: Requirements manifest
        environ: Environment variables to read JAVA_HOME / ANDROID_HOME from
        runner: Command runner for `java -version`
    """

    platform: Platform
    manifest: Manifest = DEFAULT_MANIFEST
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    runner: CommandRunner = field(default_factory=DefaultCommandRunner)

    # -- JDK -----------------------------------------------------------------

    def required_jdk_version(self) -> str:
        check = self.manifest.check
        openjdk = check.openjdk if check is not None else None
        if openjdk is not None:
            version = openjdk.version or openjdk.minimum_version
            if version:
                return version
        return self.manifest.variable("OPENJDK_VERSION") or DEFAULT_JDK_VERSION

    def check_jdk(self, verbose: bool = False) -> CheckResult:
        required = self.required_jdk_version()
        required_major = parse_major(required) or parse_major(DEFAULT_JDK_VERSION) or 17
        install_hint = f"Install JDK {required} or later from {DEPENDENCIES_URL}"

        java_home = self.environ.get("JAVA_HOME", "").strip()
        if not java_home or not Path(java_home).is_dir():
            if self.platform == Platform.MACOS:
                recommendation = f"Install JDK {required} from {DEPENDENCIES_URL} or set JAVA_HOME"
            else:
                recommendation = f"Install JDK {required} or later and set JAVA_HOME environment variable"
            return CheckResult.error(JDK_NAME, "JAVA_HOME not set or directory not found", recommendation)

        java = Path(java_home) / "bin" / self.platform.exe_name("java")
        if not java.is_file():
            return CheckResult.warning(
                JDK_NAME,
                f"JAVA_HOME is set but java executable not found at {java}",
                "Verify JAVA_HOME points to a valid JDK installation",
            )

        details = {"JAVA_HOME": java_home, "RequiredVersion": required} if verbose else None

        try:
            result = self.runner.run(java, ["-version"])
        except OSError as e:
            return CheckResult.error(JDK_NAME, "Could not verify Java installation", f"Error: {e}")

        # java prints its version banner on stderr; some builds use stdout.
        major = None
        if result.ok:
            major = parse_java_major(result.stderr)
            if major is None:
                major = parse_java_major(result.stdout)

        if major is None:
            return CheckResult.success(JDK_NAME, f"Found at {java_home}", details)
        if major >= required_major:
            return CheckResult.success(JDK_NAME, f"Version {major} (JAVA_HOME: {java_home})", details)
        if major >= OLDEST_USABLE_JDK:
            return CheckResult.warning(
                JDK_NAME,
                f"Version {major} detected. JDK {required_major}+ recommended for best compatibility.",
                install_hint,
                details,
            )
        return CheckResult.error(
            JDK_NAME,
            f"Version {major} detected. JDK {required_major}+ required.",
            install_hint,
            details,
        )

    # -- Android SDK ---------------------------------------------------------

    def _default_sdk_root(self) -> Path | None:
        match self.platform:
            case Platform.MACOS:
                return home(self.environ, self.platform) / "Library" / "Android" / "sdk"
            case Platform.WINDOWS:
                return local_app_data(self.environ, self.platform) / "Android" / "Sdk"
            case Platform.LINUX:
                return home(self.environ, self.platform) / "Android" / "Sdk"
            case Platform.UNKNOWN:
                return None

    def resolve_sdk_root(self) -> Path | None:
        """ANDROID_HOME, then ANDROID_SDK_ROOT, then the per-OS default location."""
        for var in ("ANDROID_HOME", "ANDROID_SDK_ROOT"):
            value = self.environ.get(var, "").strip()
            if value:
                return Path(value)
        default = self._default_sdk_root()
        if default is not None and default.is_dir():
            return default
        return None

    def check_android_sdk(self, verbose: bool = False) -> CheckResult:
        root = self.resolve_sdk_root()
        if root is None or not root.is_dir():
            return CheckResult.error(
                SDK_NAME,
                "ANDROID_HOME or ANDROID_SDK_ROOT not set, or directory not found",
                "Install Android SDK through Android Studio or Visual Studio, then set "
                f"ANDROID_HOME environment variable. See: {DEPENDENCIES_URL}",
            )

        min_api = self.manifest.int_variable("MIN_ANDROID_API", DEFAULT_MIN_API)
        target_api = self.manifest.int_variable("TARGET_ANDROID_API", DEFAULT_TARGET_API)

        missing = [d for d in REQUIRED_SDK_DIRS if not (root / d).is_dir()]
        if missing:
            return CheckResult.warning(
                SDK_NAME,
                f"Found at {root}, but missing components: {', '.join(missing)}",
                f"Use Android SDK Manager to install missing components (API {min_api}+ required)",
            )

        levels = platform_api_levels(root / "platforms")
        details = self._sdk_details(root, levels) if verbose else None

        if not any(level >= min_api for level in levels):
            return CheckResult.error(
                SDK_NAME,
                f"Found at {root}, but no platforms API {min_api}+ detected",
                f"Install Android SDK Platform API {min_api} or later using Android SDK Manager",
                details,
            )

        if verbose and not any(level >= target_api for level in levels):
            return CheckResult.warning(
                SDK_NAME,
                f"Found at {root}. Minimum API {min_api} found, but target API {target_api} recommended",
                f"Install Android SDK Platform API {target_api} for latest features and "
                "Google Play compatibility",
                details,
            )

        return CheckResult.success(SDK_NAME, f"Found at {root}", details)

    def _sdk_details(self, root: Path, levels: list[int]) -> dict[str, str]:
        details = {
            "Path": str(root),
            "Platforms": ", ".join(str(level) for level in levels) or "none",
        }
        check = self.manifest.check
        if check is not None and check.android is not None and check.android.packages:
            missing = missing_packages(root, check.android.packages)
            details["MissingPackages"] = ", ".join(missing) or "none"
        return details
