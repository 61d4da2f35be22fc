"""Render a build descriptor as a Kotlin-DSL ``build.gradle.kts`` module script."""

from __future__ import annotations

from typing import List

from ormayu_build.build.config import BuildDescriptor

INDENT = "    "


def kotlin_string(value: str) -> str:
    """Quote a value as a Kotlin string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("$", "\\$")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def _block(name: str, body: List[str], depth: int = 0) -> List[str]:
    pad = INDENT * depth
    lines = [f"{pad}{name} {{"]
    lines.extend(f"{INDENT * (depth + 1)}{line}" if line else "" for line in body)
    lines.append(f"{pad}}}")
    return lines


def _sdk_lines(descriptor: BuildDescriptor, symbolic: bool) -> List[str]:
    identity = descriptor.identity
    sdk = descriptor.sdk
    version = descriptor.app_version

    if symbolic:
        compile_sdk = "flutter.compileSdkVersion"
        ndk_version = "flutter.ndkVersion"
        min_sdk = "flutter.minSdkVersion"
        target_sdk = "flutter.targetSdkVersion"
        version_code = "flutter.versionCode"
        version_name = "flutter.versionName"
    else:
        compile_sdk = str(sdk.compile_sdk)
        ndk_version = kotlin_string(sdk.ndk_version)
        min_sdk = str(sdk.min_sdk)
        target_sdk = str(sdk.target_sdk)
        version_code = str(version.version_code)
        version_name = kotlin_string(version.version_name)

    lines = [
        f"namespace = {kotlin_string(identity.namespace)}",
        f"compileSdk = {compile_sdk}",
        f"ndkVersion = {ndk_version}",
        "",
    ]
    lines.extend(_block("defaultConfig", [
        f"applicationId = {kotlin_string(identity.application_id)}",
        f"minSdk = {min_sdk}",
        f"targetSdk = {target_sdk}",
        f"versionCode = {version_code}",
        f"versionName = {version_name}",
    ]))
    return lines


def _android_block(descriptor: BuildDescriptor, symbolic: bool) -> List[str]:
    language = descriptor.language
    body = _sdk_lines(descriptor, symbolic)

    compile_options = [
        f"sourceCompatibility = JavaVersion.{language.source_compatibility.gradle_name}",
        f"targetCompatibility = JavaVersion.{language.target_compatibility.gradle_name}",
    ]
    if descriptor.core_library_desugaring_enabled:
        compile_options.append("isCoreLibraryDesugaringEnabled = true")
    body.append("")
    body.extend(_block("compileOptions", compile_options))

    body.append("")
    body.extend(_block("kotlinOptions", [
        f"jvmTarget = JavaVersion.{language.jvm_target.gradle_name}.toString()",
    ]))

    # the platform signs each build type with its namesake identity unless told otherwise
    overrides: List[str] = []
    for selection in descriptor.signing:
        if selection.is_default:
            continue
        overrides.extend(_block(
            f"getByName({kotlin_string(selection.build_type.value)})",
            [f"signingConfig = signingConfigs.getByName({kotlin_string(selection.signing_config)})"],
        ))
    if overrides:
        body.append("")
        body.extend(_block("buildTypes", overrides))

    return _block("android", body)


def render_gradle_kts(descriptor: BuildDescriptor, symbolic: bool = False) -> str:
    """Render the module's ``build.gradle.kts``.

    Args:
        descriptor: Resolved descriptor
        symbolic: Reference the ``flutter`` extension for SDK and version
            values instead of writing the resolved literals

    Returns:
        Script text ending with a newline
    """
    lines: List[str] = []
    lines.extend(_block("plugins", [f"id({kotlin_string(plugin)})" for plugin in descriptor.plugins]))
    lines.append("")
    lines.extend(_android_block(descriptor, symbolic))
    lines.append("")
    lines.extend(_block("flutter", [f"source = {kotlin_string(descriptor.source_root.path)}"]))

    if descriptor.dependencies:
        lines.append("")
        lines.extend(_block("dependencies", [
            f"{dep.configuration}({kotlin_string(dep.notation)})" for dep in descriptor.dependencies
        ]))

    return "\n".join(lines) + "\n"
