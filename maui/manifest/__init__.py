"""Requirements manifest: model and loader."""

from .loader import (
    BUNDLED_MANIFEST_PATH,
    DEFAULT_MANIFEST,
    ManifestLoader,
    default_manifest,
    parse_manifest_text,
)
from .model import (
    AndroidEmulator,
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
    "AndroidEmulator",
    "AndroidPackage",
    "AndroidRequirement",
    "CheckConfiguration",
    "DotNetRequirement",
    "DotNetSdk",
    "Manifest",
    "OpenJdkRequirement",
    "WindowsRequirement",
    "XcodeRequirement",
]
