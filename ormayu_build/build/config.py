"""Build descriptor model for the ormayu_app Android module.

This module contains the immutable configuration values the resolver emits
and the static literals of the module, gathered in ``ModuleSettings``.
"""

from __future__ import annotations

import enum
import json
import pathlib
from typing import Any, Dict, Optional, Tuple, Union

import pydantic
import yaml
from pydantic import ConfigDict, Field, field_validator, model_validator


class JavaVersion(str, enum.Enum):
    """JVM language levels understood by the platform build tool."""

    VERSION_1_8 = "1.8"
    VERSION_11 = "11"
    VERSION_17 = "17"
    VERSION_21 = "21"

    @property
    def gradle_name(self) -> str:
        """Name of the matching ``JavaVersion`` constant in Gradle."""
        return self.name


class BuildType(str, enum.Enum):
    """Named build variants of an Android application module."""

    DEBUG = "debug"
    PROFILE = "profile"
    RELEASE = "release"

    @property
    def task_suffix(self) -> str:
        """Suffix used by the ``assemble<BuildType>`` Gradle task."""
        return self.value.capitalize()


class _FrozenModel(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class ApplicationIdentity(_FrozenModel):
    """Namespace of the generated code and id of the installable package."""

    namespace: str
    application_id: str


class SdkVersionSet(_FrozenModel):
    """SDK levels forwarded from the SDK-info provider.

    The ordering compile >= target >= min is left to the platform tool.
    """

    compile_sdk: int
    min_sdk: int
    target_sdk: int
    ndk_version: str


class AppVersion(_FrozenModel):
    """Version code and name of the installable package."""

    version_code: int
    version_name: str


class LanguageCompatibility(_FrozenModel):
    """Java source/target compatibility and the Kotlin JVM target."""

    source_compatibility: JavaVersion
    target_compatibility: JavaVersion
    jvm_target: JavaVersion

    @model_validator(mode="after")
    def validate_levels_match(self) -> "LanguageCompatibility":
        """All three levels must be equal."""
        levels = {self.source_compatibility, self.target_compatibility, self.jvm_target}
        if len(levels) != 1:
            raise ValueError(
                "source_compatibility, target_compatibility and jvm_target must be equal, "
                f"got {self.source_compatibility.value}/{self.target_compatibility.value}/"
                f"{self.jvm_target.value}"
            )
        return self

    @classmethod
    def uniform(cls, level: JavaVersion) -> "LanguageCompatibility":
        return cls(source_compatibility=level, target_compatibility=level, jvm_target=level)


class SigningSelection(_FrozenModel):
    """Signing identity selected for one build type."""

    build_type: BuildType
    signing_config: str

    @property
    def is_default(self) -> bool:
        """Whether the platform would pick this identity without configuration."""
        return self.build_type.value == self.signing_config


class DesugaringDependency(_FrozenModel):
    """A pinned library coordinate added when desugaring is enabled."""

    module: str
    version: str
    configuration: str = "coreLibraryDesugaring"

    @field_validator("module")
    @classmethod
    def validate_module(cls, v: str) -> str:
        if v.count(":") != 1 or not all(v.split(":")):
            raise ValueError("Module must be in 'group:name' form")
        return v

    @property
    def notation(self) -> str:
        """Gradle dependency notation, ``group:name:version``."""
        return f"{self.module}:{self.version}"


class SourceRoot(_FrozenModel):
    """Relative path from the module to the shared Flutter source tree."""

    path: str


class BuildDescriptor(_FrozenModel):
    """Fully resolved build descriptor consumed by the platform build tool.

    Attributes:
        identity: Namespace and application id
        sdk: Compile/min/target SDK levels and NDK version
        app_version: Version code and name
        language: Java/Kotlin compatibility levels
        core_library_desugaring_enabled: Whether JDK library desugaring is on
        signing: Signing selection for every configured build type
        source_root: Location of the Flutter source tree
        dependencies: Declared build dependencies
        plugins: Ordered plugin ids activated for the module
    """

    identity: ApplicationIdentity
    sdk: SdkVersionSet
    app_version: AppVersion
    language: LanguageCompatibility
    core_library_desugaring_enabled: bool
    signing: Tuple[SigningSelection, ...]
    source_root: SourceRoot
    dependencies: Tuple[DesugaringDependency, ...]
    plugins: Tuple[str, ...]

    def signing_for(self, build_type: Union[BuildType, str]) -> Optional[SigningSelection]:
        """Return the signing selection for a build type, if one is configured."""
        build_type = BuildType(build_type)
        for selection in self.signing:
            if selection.build_type == build_type:
                return selection
        return None

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> BuildDescriptor:
        """Create a BuildDescriptor from a dictionary.

        Args:
            config_dict: Dictionary containing descriptor values.

        Returns:
            BuildDescriptor instance.
        """
        return cls.model_validate(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert the BuildDescriptor to a JSON-compatible dictionary."""
        return self.model_dump(mode="json")

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, data: str) -> BuildDescriptor:
        return cls.from_dict(json.loads(data))

    @classmethod
    def from_json_file(cls, json_path: Union[str, pathlib.Path]) -> BuildDescriptor:
        """Load a BuildDescriptor from a JSON file.

        Args:
            json_path: Path to the JSON file.

        Returns:
            BuildDescriptor instance.
        """
        with open(json_path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_json_file(self, json_path: Union[str, pathlib.Path]) -> None:
        """Save the BuildDescriptor to a JSON file.

        Args:
            json_path: Path where the JSON file will be saved.
        """
        with open(json_path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)
            f.write("\n")

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    @classmethod
    def from_yaml(cls, data: str) -> BuildDescriptor:
        return cls.from_dict(yaml.safe_load(data))

    @classmethod
    def from_yaml_file(cls, yaml_path: Union[str, pathlib.Path]) -> BuildDescriptor:
        with open(yaml_path, "r", encoding="utf-8") as f:
            return cls.from_yaml(f.read())

    def to_yaml_file(self, yaml_path: Union[str, pathlib.Path]) -> None:
        with open(yaml_path, "w", encoding="utf-8") as f:
            f.write(self.to_yaml())


class ModuleSettings(_FrozenModel):
    """Static literals of the ormayu_app Android module.

    Constructed once as ``MODULE_SETTINGS``; everything the resolver does not
    read from the SDK-info provider comes from here.
    """

    namespace: str = "com.example.ormayu_app"
    application_id: str = "com.example.ormayu_app"
    language_level: JavaVersion = JavaVersion.VERSION_11
    core_library_desugaring_enabled: bool = True
    desugaring_module: str = "com.android.tools:desugar_jdk_libs"
    desugaring_version: str = "2.0.4"
    release_signing_config: str = "debug"
    signing_configs: Tuple[str, ...] = ("debug",)
    build_types: Tuple[BuildType, ...] = (BuildType.DEBUG, BuildType.RELEASE)
    source_root: str = "../.."
    plugins: Tuple[str, ...] = Field(
        default=(
            "com.android.application",
            "kotlin-android",
            "dev.flutter.flutter-gradle-plugin",
        )
    )


MODULE_SETTINGS = ModuleSettings()
