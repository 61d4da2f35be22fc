"""Utility functions for the ormayu-build system.

This module contains helpers used around the resolver: Java ``.properties``
parsing, descriptor consistency checks that mirror the platform tool's own
diagnostics, and Gradle wrapper lookup.
"""

from __future__ import annotations

import os
import pathlib
import re
from typing import Dict, Iterable, List, Literal, Union

import pydantic

from ormayu_build.build.config import BuildDescriptor, BuildType

_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SEPARATOR = re.compile(r"(?<!\\)(?:\\\\)*[=:\s]")


class Issue(pydantic.BaseModel):
    """A problem found in a build descriptor."""

    severity: Literal["error", "warning"]
    field: str
    message: str

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.field}: {self.message}"


def _unescape(value: str) -> str:
    out = []
    chars = iter(value)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, "")
        if nxt == "u":
            code = "".join(next(chars, "") for _ in range(4))
            try:
                out.append(chr(int(code, 16)))
            except ValueError:
                out.append("\\u" + code)
        else:
            out.append(_ESCAPES.get(nxt, nxt))
    return "".join(out)


def _logical_lines(text: str) -> Iterable[str]:
    buffer = ""
    for raw in text.splitlines():
        line = raw.lstrip() if buffer else raw.strip()
        if not buffer and (not line or line[0] in "#!"):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continue
        yield buffer + line
        buffer = ""
    if buffer:
        yield buffer


def parse_properties(text: str) -> Dict[str, str]:
    """Parse the contents of a Java ``.properties`` file.

    Supports ``#``/``!`` comments, ``=``, ``:`` or whitespace separators,
    backslash escapes and line continuations.

    Args:
        text: File contents

    Returns:
        Mapping of property names to values
    """
    properties: Dict[str, str] = {}
    for line in _logical_lines(text):
        match = _SEPARATOR.search(line)
        if match is None:
            key, value = line, ""
        else:
            sep_index = match.end() - 1
            key = line[:sep_index]
            rest = line[sep_index:]
            value = re.sub(r"^\s*[=:]?\s*", "", rest, count=1)
        properties[_unescape(key.rstrip())] = _unescape(value)
    return properties


def load_properties(path: Union[str, pathlib.Path]) -> Dict[str, str]:
    """Load a Java ``.properties`` file such as ``local.properties``.

    Args:
        path: Path to the properties file

    Returns:
        Mapping of property names to values
    """
    with open(path, "r", encoding="utf-8") as f:
        return parse_properties(f.read())


def _is_exact_version(version: str) -> bool:
    return bool(version) and not any(ch in version for ch in "+[](),")


def check_descriptor(
        descriptor: BuildDescriptor,
        signing_configs: Iterable[str] = ("debug",),
) -> List[Issue]:
    """Check a descriptor for the problems the platform tool would reject.

    Args:
        descriptor: Descriptor to check
        signing_configs: Signing identities defined for the module

    Returns:
        Issues found, errors and warnings mixed, in field order
    """
    issues: List[Issue] = []
    available = set(signing_configs)

    if not descriptor.identity.namespace:
        issues.append(Issue(severity="error", field="identity.namespace", message="Namespace is empty"))
    if not descriptor.identity.application_id:
        issues.append(
            Issue(severity="error", field="identity.application_id", message="Application id is empty")
        )

    sdk = descriptor.sdk
    if sdk.compile_sdk < sdk.target_sdk:
        issues.append(Issue(
            severity="error",
            field="sdk.compile_sdk",
            message=f"compileSdk {sdk.compile_sdk} is lower than targetSdk {sdk.target_sdk}",
        ))
    if sdk.target_sdk < sdk.min_sdk:
        issues.append(Issue(
            severity="error",
            field="sdk.target_sdk",
            message=f"targetSdk {sdk.target_sdk} is lower than minSdk {sdk.min_sdk}",
        ))

    for selection in descriptor.signing:
        if selection.signing_config not in available:
            issues.append(Issue(
                severity="error",
                field=f"signing.{selection.build_type.value}",
                message=f"SigningConfig with name '{selection.signing_config}' not found",
            ))

    release = descriptor.signing_for(BuildType.RELEASE)
    if release is not None and release.signing_config == BuildType.DEBUG.value:
        issues.append(Issue(
            severity="warning",
            field="signing.release",
            message="Release artifacts are signed with the debug identity",
        ))

    if descriptor.core_library_desugaring_enabled and not any(
            dep.configuration == "coreLibraryDesugaring" for dep in descriptor.dependencies
    ):
        issues.append(Issue(
            severity="error",
            field="dependencies",
            message="Core library desugaring is enabled but no coreLibraryDesugaring dependency is declared",
        ))

    for dep in descriptor.dependencies:
        if not _is_exact_version(dep.version):
            issues.append(Issue(
                severity="error",
                field="dependencies",
                message=f"Dependency {dep.module} is not pinned to an exact version: '{dep.version}'",
            ))

    return issues


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(issue.severity == "error" for issue in issues)


def find_gradle_wrapper(project_dir: Union[str, pathlib.Path], wrapper: str = "gradlew") -> pathlib.Path:
    """Locate the Gradle wrapper script of an Android project.

    On Windows the ``.bat`` variant is preferred when it exists.

    Args:
        project_dir: Android project directory
        wrapper: Wrapper script name

    Returns:
        Path to the wrapper script

    Raises:
        FileNotFoundError: If no wrapper script exists
    """
    project_dir = pathlib.Path(project_dir)
    candidates = [project_dir / wrapper]
    if os.name == "nt":
        candidates.insert(0, project_dir / f"{wrapper}.bat")

    for candidate in candidates:
        if candidate.exists():
            return candidate

    raise FileNotFoundError(f"Gradle wrapper not found in {project_dir}")
