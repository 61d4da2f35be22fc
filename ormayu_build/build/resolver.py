"""Build configuration resolver.

Maps the static module literals and the values of an SDK-info provider to a
``BuildDescriptor``. Resolution is pure: the resolver never substitutes a
default for a value the provider cannot supply.
"""

from __future__ import annotations

from typing import Any, Callable, FrozenSet, Optional, Tuple, TypeVar

import pydantic
import structlog

from ormayu_build.build.config import (
    MODULE_SETTINGS,
    ApplicationIdentity,
    AppVersion,
    BuildDescriptor,
    BuildType,
    DesugaringDependency,
    LanguageCompatibility,
    ModuleSettings,
    SdkVersionSet,
    SigningSelection,
    SourceRoot,
)
from ormayu_build.build.provider import SdkInfoProvider
from ormayu_build.utils.exceptions import ConfigurationError

T = TypeVar("T", bound=pydantic.BaseModel)


class BuildConfigResolver:
    """Resolves the build descriptor of the ormayu_app module.

    Attributes:
        provider: SDK-info provider read by the SDK and version operations
        settings: Static module literals
    """

    def __init__(
            self,
            provider: SdkInfoProvider,
            settings: ModuleSettings = MODULE_SETTINGS,
            logger: Optional[Any] = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            provider: Source of SDK levels and version numbers
            settings: Static module literals
            logger: Optional structlog logger
        """
        self.provider = provider
        self.settings = settings
        self._logger = logger or structlog.get_logger("resolver")

    def _build(self, model: Callable[..., T], **values: Any) -> T:
        try:
            return model(**values)
        except pydantic.ValidationError as e:
            name = getattr(model, "__name__", str(model))
            raise ConfigurationError(
                f"Invalid {name} values: {e}",
                config_key=name,
                details={"validation_errors": e.errors()},
            ) from e

    def resolve_identity(self) -> ApplicationIdentity:
        """Return the namespace and application id literals."""
        return ApplicationIdentity(
            namespace=self.settings.namespace,
            application_id=self.settings.application_id,
        )

    def resolve_sdk_versions(self, provider: Optional[SdkInfoProvider] = None) -> SdkVersionSet:
        """Forward the SDK levels and NDK version of the provider unchanged.

        Args:
            provider: Provider to read; defaults to the injected one

        Raises:
            ProviderError: If the provider cannot supply a value
            ConfigurationError: If a supplied value has the wrong type
        """
        provider = provider if provider is not None else self.provider
        return self._build(
            SdkVersionSet,
            compile_sdk=provider.compile_sdk_version,
            min_sdk=provider.min_sdk_version,
            target_sdk=provider.target_sdk_version,
            ndk_version=provider.ndk_version,
        )

    def resolve_app_version(self, provider: Optional[SdkInfoProvider] = None) -> AppVersion:
        """Forward the version code and name of the provider unchanged."""
        provider = provider if provider is not None else self.provider
        return self._build(
            AppVersion,
            version_code=provider.version_code,
            version_name=provider.version_name,
        )

    def resolve_language_compatibility(self) -> LanguageCompatibility:
        return LanguageCompatibility.uniform(self.settings.language_level)

    def resolve_signing_selection(self) -> SigningSelection:
        """Return the signing identity of the release build type.

        Release reuses the debug identity, so release artifacts are never
        distinctly signed.
        """
        selection = SigningSelection(
            build_type=BuildType.RELEASE,
            signing_config=self.settings.release_signing_config,
        )
        if selection.signing_config == BuildType.DEBUG.value:
            self._logger.warning(
                "Release build type is signed with the debug identity",
                build_type=selection.build_type.value,
                signing_config=selection.signing_config,
            )
        return selection

    def resolve_signing(self) -> Tuple[SigningSelection, ...]:
        """Return the signing selection of every configured build type."""
        selections = []
        for build_type in self.settings.build_types:
            if build_type == BuildType.RELEASE:
                selections.append(self.resolve_signing_selection())
            else:
                selections.append(
                    SigningSelection(build_type=build_type, signing_config=build_type.value)
                )
        return tuple(selections)

    def resolve_source_root(self) -> SourceRoot:
        return SourceRoot(path=self.settings.source_root)

    def resolve_dependencies(self) -> FrozenSet[DesugaringDependency]:
        """Return the pinned desugaring library, the only declared dependency."""
        return frozenset({
            DesugaringDependency(
                module=self.settings.desugaring_module,
                version=self.settings.desugaring_version,
            )
        })

    def resolve_plugins(self) -> Tuple[str, ...]:
        return tuple(self.settings.plugins)

    def resolve(self) -> BuildDescriptor:
        """Resolve every field of the build descriptor.

        Returns:
            The resolved descriptor

        Raises:
            ProviderError: If the provider cannot supply a value
            ConfigurationError: If a resolved value is invalid
        """
        sdk = self.resolve_sdk_versions()
        app_version = self.resolve_app_version()
        dependencies = tuple(sorted(self.resolve_dependencies(), key=lambda dep: dep.notation))

        descriptor = self._build(
            BuildDescriptor,
            identity=self.resolve_identity(),
            sdk=sdk,
            app_version=app_version,
            language=self.resolve_language_compatibility(),
            core_library_desugaring_enabled=self.settings.core_library_desugaring_enabled,
            signing=self.resolve_signing(),
            source_root=self.resolve_source_root(),
            dependencies=dependencies,
            plugins=self.resolve_plugins(),
        )

        self._logger.info(
            "Resolved build descriptor",
            application_id=descriptor.identity.application_id,
            compile_sdk=sdk.compile_sdk,
            min_sdk=sdk.min_sdk,
            target_sdk=sdk.target_sdk,
            version_code=app_version.version_code,
            version_name=app_version.version_name,
        )
        return descriptor
