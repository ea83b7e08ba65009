"""Platform abstraction layer."""

from .detection import (
    Arch,
    OsVersion,
    Platform,
    PlatformInfo,
    detect,
)
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .paths import (
    config_path,
    home,
    local_app_data,
    user_config_dir,
)
from .process import (
    ProbeResult,
    probe,
)

__all__ = [
    # detection
    "Arch",
    "OsVersion",
    "Platform",
    "PlatformInfo",
    "detect",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # paths
    "config_path",
    "home",
    "local_app_data",
    "user_config_dir",
    # process
    "ProbeResult",
    "probe",
]
