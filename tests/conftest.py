"""Pytest configuration and fixtures for ormayu-build tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog
import yaml

from ormayu_build.build.provider import StaticSdkInfoProvider
from ormayu_build.build.resolver import BuildConfigResolver
from ormayu_build.core.config_manager import ConfigManager


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Keep structlog configuration from leaking between tests."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def sdk_provider() -> StaticSdkInfoProvider:
    """SDK-info provider with fixed values."""
    return StaticSdkInfoProvider(
        compile_sdk_version=35,
        ndk_version="27.0.12077973",
        min_sdk_version=21,
        target_sdk_version=35,
        version_code=7,
        version_name="1.2.0",
    )


@pytest.fixture
def resolver(sdk_provider: StaticSdkInfoProvider) -> BuildConfigResolver:
    return BuildConfigResolver(sdk_provider)


@pytest.fixture
def android_project(tmp_path: Path) -> Path:
    """Android project directory with a Flutter-generated local.properties."""
    project_dir = tmp_path / "android"
    project_dir.mkdir()
    (project_dir / "local.properties").write_text(
        "sdk.dir=/opt/android-sdk\n"
        "flutter.sdk=/opt/flutter\n"
        "flutter.buildMode=release\n"
        "flutter.versionName=1.4.2\n"
        "flutter.versionCode=12\n",
        encoding="utf-8",
    )
    return project_dir


@pytest.fixture
def temp_config_file(tmp_path: Path, android_project: Path) -> Path:
    """Create a temporary configuration file for testing."""
    test_config = {
        "logging": {
            "level": "DEBUG",
            "format": "text",
            "file": {"enabled": False},
            "console": {"enabled": True, "level": "WARNING"},
        },
        "flutter": {"project_dir": str(android_project)},
        "build": {"output_dir": str(tmp_path / "out"), "build_types": ["release"]},
    }

    config_path = tmp_path / "ormayu-build.yaml"
    with config_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(test_config, f)
    return config_path


@pytest.fixture
def config_manager(temp_config_file: Path) -> Generator[ConfigManager, None, None]:
    """Create a ConfigManager instance for testing."""
    manager = ConfigManager(config_path=temp_config_file)
    manager.initialize()
    yield manager
    manager.shutdown()
