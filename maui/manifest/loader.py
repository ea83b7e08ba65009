"""Manifest resolution with fallback.

`ManifestLoader.load()` never raises. It tries, in order:

1. the given source (or the configured default URL): fetched over HTTP when it
   is an http(s) URL, read from disk otherwise;
2. the manifest bundled with the package (`maui/data/default-manifest.json`);
3. `DEFAULT_MANIFEST`, the in-code floor used when nothing else is available.

Failed tiers are logged at DEBUG and otherwise ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from types import MappingProxyType

from maui.core.config import DEFAULT_MANIFEST_URL
from maui.core.result import Err, Ok, Result
from maui.core.structured import as_str_dict
from maui.platform.http import HttpClient, is_http_url

from .model import (
    AndroidPackage,
    AndroidRequirement,
    CheckConfiguration,
    DotNetRequirement,
    DotNetSdk,
    Manifest,
    OpenJdkRequirement,
    WindowsRequirement,
    XcodeRequirement,
)

__all__ = [
    "BUNDLED_MANIFEST_PATH",
    "DEFAULT_MANIFEST",
    "ManifestLoader",
    "default_manifest",
    "parse_manifest_text",
]

logger = logging.getLogger(__name__)

BUNDLED_MANIFEST_PATH = Path(__file__).parent.parent / "data" / "default-manifest.json"

# Floor requirements when neither the remote nor the bundled manifest loads.
# MIN_ANDROID_API must stay <= TARGET_ANDROID_API.
DEFAULT_MANIFEST = Manifest(
    check=CheckConfiguration(
        tool_version="1.0.0",
        variables=MappingProxyType(
            {
                "DOTNET_SDK_VERSION": "8.0.0",
                "OPENJDK_VERSION": "17.0",
                "MIN_ANDROID_API": "21",
                "TARGET_ANDROID_API": "34",
            }
        ),
        openjdk=OpenJdkRequirement(version="17.0"),
        xcode=XcodeRequirement(minimum_version="15", minimum_version_name="15.0"),
        android=AndroidRequirement(
            packages=(
                AndroidPackage(path="platforms;android-34", version="1"),
                AndroidPackage(path="platforms;android-33", version="1"),
                AndroidPackage(path="build-tools;34.0.0", version="34.0.0"),
                AndroidPackage(path="platform-tools", version="34.0.0"),
            )
        ),
        dotnet=DotNetRequirement(
            sdks=(
                DotNetSdk(
                    version="8.0.0",
                    workload_ids=("maui", "android", "ios", "maccatalyst", "macos"),
                ),
            )
        ),
        vswin=WindowsRequirement(minimum_version="17.8"),
    )
)


def default_manifest() -> Manifest:
    return DEFAULT_MANIFEST


def _strip_trailing_commas(text: str) -> str:
    """Drop commas directly followed by `}` or `]`, ignoring string contents."""
    out: list[str] = []
    in_string = False
    escaped = False
    n = len(text)
    for i, ch in enumerate(text):
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == ",":
            j = i + 1
            while j < n and text[j] in " \t\r\n":
                j += 1
            if j < n and text[j] in "}]":
                continue
        out.append(ch)
    return "".join(out)


def parse_manifest_text(text: str) -> Result[Manifest, str]:
    """Parse manifest JSON loosely (trailing commas, any key case)."""
    try:
        data_obj: object = json.loads(_strip_trailing_commas(text.lstrip("\ufeff")))
    except (ValueError, RecursionError) as e:
        return Err(f"JSON parse error: {e}")
    data = as_str_dict(data_obj)
    if data is None:
        return Err("Expected a JSON object")
    return Ok(Manifest.from_dict(data))


class ManifestLoader:
    """Resolve the requirements manifest for a diagnostic run."""

    def __init__(
        self,
        http: HttpClient,
        *,
        default_url: str = DEFAULT_MANIFEST_URL,
        bundled_path: Path | None = BUNDLED_MANIFEST_PATH,
    ) -> None:
        self._http = http
        self._default_url = default_url
        self._bundled_path = bundled_path

    def load(self, source: str | None = None) -> Manifest:
        """Load the manifest from `source`, falling back as needed."""
        target = (source or "").strip() or self._default_url

        match self._load_source(target):
            case Ok(manifest):
                logger.debug("manifest loaded from %s", target)
                return manifest
            case Err(error):
                logger.debug("manifest source %s unavailable: %s", target, error)

        match self._load_bundled():
            case Ok(manifest):
                logger.debug("using bundled manifest %s", self._bundled_path)
                return manifest
            case Err(error):
                logger.debug("bundled manifest unavailable: %s", error)

        logger.debug("using built-in default manifest")
        return DEFAULT_MANIFEST

    def _load_source(self, target: str) -> Result[Manifest, str]:
        if is_http_url(target):
            fetched = self._http.get_text(target)
            if isinstance(fetched, Err):
                return Err(str(fetched.error))
            return parse_manifest_text(fetched.value)
        return self._load_file(Path(target))

    def _load_bundled(self) -> Result[Manifest, str]:
        if self._bundled_path is None:
            return Err("no bundled manifest configured")
        return self._load_file(self._bundled_path)

    def _load_file(self, path: Path) -> Result[Manifest, str]:
        try:
            text = path.expanduser().read_text(encoding="utf-8")
        except (OSError, ValueError, RuntimeError) as e:
            return Err(f"cannot read {path}: {e}")
        return parse_manifest_text(text)
