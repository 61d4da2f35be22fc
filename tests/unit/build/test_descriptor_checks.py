"""Unit tests for properties parsing and descriptor checks."""

import os
from pathlib import Path

import pytest

from ormayu_build.build.config import MODULE_SETTINGS, DesugaringDependency
from ormayu_build.build.provider import StaticSdkInfoProvider
from ormayu_build.build.resolver import BuildConfigResolver
from ormayu_build.build.utils import (
    check_descriptor,
    find_gradle_wrapper,
    has_errors,
    load_properties,
    parse_properties,
)


def _provider(compile_sdk: int = 35, min_sdk: int = 21, target_sdk: int = 35) -> StaticSdkInfoProvider:
    return StaticSdkInfoProvider(
        compile_sdk_version=compile_sdk,
        ndk_version="27.0.12077973",
        min_sdk_version=min_sdk,
        target_sdk_version=target_sdk,
        version_code=1,
        version_name="1.0",
    )


class TestParseProperties:
    """Tests for Java .properties parsing."""

    def test_separators_and_comments(self):
        text = (
            "# generated by flutter\n"
            "! legacy comment\n"
            "\n"
            "sdk.dir=/opt/android-sdk\n"
            "flutter.versionName : 1.0.0\n"
            "flutter.versionCode 3\n"
            "empty=\n"
        )
        assert parse_properties(text) == {
            "sdk.dir": "/opt/android-sdk",
            "flutter.versionName": "1.0.0",
            "flutter.versionCode": "3",
            "empty": "",
        }

    def test_windows_paths_are_unescaped(self):
        properties = parse_properties("flutter.sdk=C\\:\\\\src\\\\flutter\n")
        assert properties["flutter.sdk"] == "C:\\src\\flutter"

    def test_escaped_separator_in_key(self):
        assert parse_properties("a\\=b=c\n") == {"a=b": "c"}

    def test_line_continuation(self):
        text = "flutter.versionName=1.\\\n    2.3\nnext=value\n"
        assert parse_properties(text) == {"flutter.versionName": "1.2.3", "next": "value"}

    def test_unicode_escape(self):
        assert parse_properties("name=caf\\u00e9\n") == {"name": "café"}

    def test_key_without_value(self):
        assert parse_properties("flag\n") == {"flag": ""}

    def test_load_properties(self, tmp_path: Path):
        path = tmp_path / "local.properties"
        path.write_text("flutter.versionCode=5\n", encoding="utf-8")
        assert load_properties(path) == {"flutter.versionCode": "5"}


class TestCheckDescriptor:
    """Tests for descriptor consistency checks."""

    def test_module_configuration_only_warns(self, resolver):
        issues = check_descriptor(resolver.resolve())

        assert len(issues) == 1
        assert issues[0].severity == "warning"
        assert issues[0].field == "signing.release"
        assert not has_errors(issues)

    def test_compile_below_target(self):
        descriptor = BuildConfigResolver(_provider(compile_sdk=33, target_sdk=34)).resolve()
        issues = check_descriptor(descriptor)

        assert has_errors(issues)
        assert any(issue.field == "sdk.compile_sdk" for issue in issues)

    def test_target_below_min(self):
        descriptor = BuildConfigResolver(_provider(min_sdk=30, target_sdk=29, compile_sdk=35)).resolve()
        issues = check_descriptor(descriptor)

        assert [issue.field for issue in issues if issue.severity == "error"] == ["sdk.target_sdk"]

    def test_missing_signing_identity(self, resolver):
        issues = check_descriptor(resolver.resolve(), signing_configs=())

        errors = [issue for issue in issues if issue.severity == "error"]
        assert {issue.field for issue in errors} == {"signing.debug", "signing.release"}

    def test_desugaring_without_dependency(self, resolver):
        descriptor = resolver.resolve().model_copy(update={"dependencies": ()})
        issues = check_descriptor(descriptor)

        assert any(issue.field == "dependencies" and issue.severity == "error" for issue in issues)

    @pytest.mark.parametrize("version", ["2.0.+", "[2.0,3.0)", ""])
    def test_unpinned_dependency(self, resolver, version):
        dependency = DesugaringDependency(module="com.android.tools:desugar_jdk_libs", version=version)
        descriptor = resolver.resolve().model_copy(update={"dependencies": (dependency,)})

        issues = check_descriptor(descriptor)

        assert any("not pinned" in issue.message for issue in issues)

    def test_empty_identity(self, sdk_provider):
        settings = MODULE_SETTINGS.model_copy(update={"namespace": "", "application_id": ""})
        issues = check_descriptor(BuildConfigResolver(sdk_provider, settings=settings).resolve())

        assert {"identity.namespace", "identity.application_id"} <= {issue.field for issue in issues}

    def test_issue_str(self, resolver):
        (issue,) = check_descriptor(resolver.resolve())
        assert str(issue) == "[WARNING] signing.release: Release artifacts are signed with the debug identity"


class TestFindGradleWrapper:
    def test_found(self, tmp_path: Path):
        (tmp_path / "gradlew").write_text("#!/bin/sh\n")
        assert find_gradle_wrapper(tmp_path).name.startswith("gradlew")

    @pytest.mark.skipif(os.name == "nt", reason="wrapper lookup prefers gradlew.bat on Windows")
    def test_missing(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            find_gradle_wrapper(tmp_path)
