"""Build configuration resolution for the ormayu_app Android module.

This package resolves the module's build descriptor and hands it to the
platform build tool.

Modules:
    config: Descriptor models and the static module settings
    provider: SDK-info providers
    resolver: Build configuration resolver
    renderer: Kotlin-DSL module script rendering
    builder: Build invocation orchestration
    utils: Properties parsing and descriptor checks
    cli: Command-line interface
"""

from __future__ import annotations

from ormayu_build.build.builder import Builder, BuildError, BuildOptions
from ormayu_build.build.config import (
    MODULE_SETTINGS,
    ApplicationIdentity,
    AppVersion,
    BuildDescriptor,
    BuildType,
    DesugaringDependency,
    JavaVersion,
    LanguageCompatibility,
    ModuleSettings,
    SdkVersionSet,
    SigningSelection,
    SourceRoot,
)
from ormayu_build.build.provider import FlutterSdkInfoProvider, SdkInfoProvider, StaticSdkInfoProvider
from ormayu_build.build.renderer import render_gradle_kts
from ormayu_build.build.resolver import BuildConfigResolver
from ormayu_build.build.utils import Issue, check_descriptor

__all__ = [
    "MODULE_SETTINGS",
    "ApplicationIdentity",
    "AppVersion",
    "BuildConfigResolver",
    "BuildDescriptor",
    "BuildError",
    "BuildOptions",
    "BuildType",
    "Builder",
    "DesugaringDependency",
    "FlutterSdkInfoProvider",
    "Issue",
    "JavaVersion",
    "LanguageCompatibility",
    "ModuleSettings",
    "SdkInfoProvider",
    "SdkVersionSet",
    "SigningSelection",
    "SourceRoot",
    "StaticSdkInfoProvider",
    "check_descriptor",
    "render_gradle_kts",
]
