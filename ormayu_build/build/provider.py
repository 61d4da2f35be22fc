"""SDK-info providers.

The resolver reads SDK levels and version numbers through the read-only
``SdkInfoProvider`` interface. ``FlutterSdkInfoProvider`` answers the way the
Flutter Gradle plugin's ``flutter`` extension does; ``StaticSdkInfoProvider``
holds fixed values for tests and explicit overrides.
"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Union, runtime_checkable

import structlog

from ormayu_build.build.utils import load_properties
from ormayu_build.utils.exceptions import ProviderError


@runtime_checkable
class SdkInfoProvider(Protocol):
    """Read-only source of the SDK and version values of a build."""

    @property
    def compile_sdk_version(self) -> int:
        ...

    @property
    def ndk_version(self) -> str:
        ...

    @property
    def min_sdk_version(self) -> int:
        ...

    @property
    def target_sdk_version(self) -> int:
        ...

    @property
    def version_code(self) -> int:
        ...

    @property
    def version_name(self) -> str:
        ...


@dataclass(frozen=True)
class StaticSdkInfoProvider:
    """Provider returning fixed values."""

    compile_sdk_version: int
    ndk_version: str
    min_sdk_version: int
    target_sdk_version: int
    version_code: int
    version_name: str


class FlutterSdkInfoProvider:
    """Provider backed by the Flutter tool's ``local.properties``.

    SDK levels default to the values the Flutter Gradle plugin ships and may
    be overridden with ``flutter.*`` properties. ``flutter.versionCode`` and
    ``flutter.versionName`` are written by ``flutter build`` from
    ``pubspec.yaml``.

    Attributes:
        project_dir: Android project directory holding the properties file
        properties_path: Full path of the properties file
    """

    DEFAULT_COMPILE_SDK_VERSION = 35
    DEFAULT_MIN_SDK_VERSION = 21
    DEFAULT_TARGET_SDK_VERSION = 35
    DEFAULT_NDK_VERSION = "27.0.12077973"
    DEFAULT_VERSION_CODE = 1
    DEFAULT_VERSION_NAME = "1.0"

    def __init__(
            self,
            project_dir: Union[str, pathlib.Path] = "android",
            properties_file: str = "local.properties",
            logger: Optional[Any] = None,
    ) -> None:
        self.project_dir = pathlib.Path(project_dir)
        self.properties_path = self.project_dir / properties_file
        self._properties: Optional[Dict[str, str]] = None
        self._logger = logger or structlog.get_logger("sdk_provider")

    @property
    def properties(self) -> Dict[str, str]:
        """Properties of the file, loaded on first access.

        Raises:
            ProviderError: If the file does not exist
        """
        if self._properties is None:
            if not self.properties_path.exists():
                raise ProviderError(
                    f"{self.properties_path} not found; run 'flutter pub get' to generate it",
                    field="local.properties",
                )
            self._properties = load_properties(self.properties_path)
            self._logger.debug(
                "Loaded SDK properties",
                path=str(self.properties_path),
                keys=sorted(self._properties),
            )
        return self._properties

    def _int_property(self, key: str, default: int) -> int:
        raw = self.properties.get(key)
        if raw is None or raw.strip() == "":
            return default
        try:
            return int(raw.strip())
        except ValueError as e:
            raise ProviderError(
                f"Property {key} must be an integer, got '{raw}'",
                field=key,
            ) from e

    def _str_property(self, key: str, default: str) -> str:
        raw = self.properties.get(key)
        if raw is None or raw.strip() == "":
            return default
        return raw.strip()

    @property
    def flutter_sdk(self) -> Optional[str]:
        return self.properties.get("flutter.sdk")

    @property
    def compile_sdk_version(self) -> int:
        return self._int_property("flutter.compileSdkVersion", self.DEFAULT_COMPILE_SDK_VERSION)

    @property
    def ndk_version(self) -> str:
        return self._str_property("flutter.ndkVersion", self.DEFAULT_NDK_VERSION)

    @property
    def min_sdk_version(self) -> int:
        return self._int_property("flutter.minSdkVersion", self.DEFAULT_MIN_SDK_VERSION)

    @property
    def target_sdk_version(self) -> int:
        return self._int_property("flutter.targetSdkVersion", self.DEFAULT_TARGET_SDK_VERSION)

    @property
    def version_code(self) -> int:
        return self._int_property("flutter.versionCode", self.DEFAULT_VERSION_CODE)

    @property
    def version_name(self) -> str:
        return self._str_property("flutter.versionName", self.DEFAULT_VERSION_NAME)
