"""Builder for the ormayu_app Android module.

This module contains the Builder class that runs one build invocation:
resolving the descriptor, checking it, writing the module script and the
descriptor for the platform tool, and optionally running the Gradle wrapper.
"""

from __future__ import annotations

import pathlib
import shutil
import subprocess
from typing import Any, List, Optional

import pydantic
import structlog
from pydantic import Field, field_validator

from ormayu_build.build.config import BuildDescriptor, BuildType
from ormayu_build.build.renderer import render_gradle_kts
from ormayu_build.build.resolver import BuildConfigResolver
from ormayu_build.build.utils import check_descriptor, find_gradle_wrapper, has_errors
from ormayu_build.utils.exceptions import OrmayuError

DESCRIPTOR_FILENAME = "descriptor.json"
SCRIPT_FILENAME = "build.gradle.kts"


class BuildError(OrmayuError):
    """Exception raised for errors during the build process."""

    pass


class BuildOptions(pydantic.BaseModel):
    """Options of one build invocation.

    Attributes:
        project_dir: Android project directory holding the Gradle wrapper
        output_dir: Directory where the descriptor and script are written
        clean: Whether to empty the output directory first
        run_gradle: Whether to run ``assemble<BuildType>`` afterwards
        gradle_wrapper: Wrapper script name inside ``project_dir``
        build_types: Build types to assemble when running Gradle
        symbolic: Render ``flutter.*`` references instead of resolved values
    """

    project_dir: pathlib.Path = pathlib.Path("android")
    output_dir: pathlib.Path = pathlib.Path("build/ormayu")
    clean: bool = True
    run_gradle: bool = False
    gradle_wrapper: str = "gradlew"
    build_types: List[BuildType] = Field(default_factory=lambda: [BuildType.RELEASE])
    symbolic: bool = False

    @field_validator("build_types", mode="before")
    @classmethod
    def validate_build_types(cls, v: Any) -> Any:
        if isinstance(v, (str, BuildType)):
            return [v]
        return v


class Builder:
    """Runs a build invocation for the ormayu_app module.

    Attributes:
        resolver: Resolver producing the descriptor
        options: Build options
        descriptor: Descriptor of the last build, if any
    """

    def __init__(
            self,
            resolver: BuildConfigResolver,
            options: Optional[BuildOptions] = None,
            logger: Optional[Any] = None,
    ) -> None:
        """Initialize the Builder.

        Args:
            resolver: Resolver producing the descriptor
            options: Build options (defaults apply when omitted)
            logger: Optional structlog logger
        """
        self.resolver = resolver
        self.options = options or BuildOptions()
        self.logger = logger or structlog.get_logger("builder")
        self.descriptor: Optional[BuildDescriptor] = None

    def log(self, message: str, level: str = "info", **kwargs: Any) -> None:
        """Log a message with the specified level.

        Args:
            message: Message to log
            level: Log level (info, warning, error, debug)
            **kwargs: Structured context
        """
        getattr(self.logger, level)(message, **kwargs)

    def check_output_dir(self) -> None:
        """Reject an output directory that is, or contains, the project or working directory.

        Raises:
            BuildError: If the output directory would overlap a protected directory
        """
        output_dir = self.options.output_dir.resolve()
        protected = {
            "project_dir": self.options.project_dir.resolve(),
            "working_dir": pathlib.Path.cwd().resolve(),
        }
        for name, path in protected.items():
            if output_dir == path or output_dir in path.parents:
                raise BuildError(
                    f"Output directory {self.options.output_dir} contains the {name.replace('_', ' ')} {path}",
                    details={"output_dir": str(output_dir), name: str(path)},
                )

    def prepare_build_environment(self) -> None:
        """Create the output directory, emptying it when ``clean`` is set.

        Raises:
            BuildError: If the output directory overlaps the project or working directory
        """
        self.check_output_dir()
        output_dir = self.options.output_dir
        if not output_dir.exists():
            output_dir.mkdir(parents=True)
        elif self.options.clean:
            self.log("Cleaning output directory", output_dir=str(output_dir))
            for item in output_dir.iterdir():
                if item.is_dir():
                    shutil.rmtree(item)
                else:
                    item.unlink()

    def resolve_and_check(self) -> BuildDescriptor:
        """Resolve the descriptor and reject it when the checks find errors.

        Raises:
            BuildError: If the descriptor has error-severity issues
        """
        descriptor = self.resolver.resolve()
        issues = check_descriptor(descriptor, self.resolver.settings.signing_configs)

        for issue in issues:
            level = "error" if issue.severity == "error" else "warning"
            self.log(issue.message, level, field=issue.field)

        if has_errors(issues):
            raise BuildError(
                "Descriptor check failed",
                details={"issues": [issue.model_dump() for issue in issues]},
            )

        self.descriptor = descriptor
        return descriptor

    def write_outputs(self, descriptor: BuildDescriptor) -> List[pathlib.Path]:
        """Write the descriptor and the rendered module script.

        Returns:
            Paths written
        """
        descriptor_path = self.options.output_dir / DESCRIPTOR_FILENAME
        descriptor.to_json_file(descriptor_path)

        script_path = self.options.output_dir / SCRIPT_FILENAME
        with open(script_path, "w", encoding="utf-8") as f:
            f.write(render_gradle_kts(descriptor, symbolic=self.options.symbolic))

        self.log("Wrote build outputs", descriptor=str(descriptor_path), script=str(script_path))
        return [descriptor_path, script_path]

    def run_gradle(self, build_type: BuildType) -> int:
        """Run ``assemble<BuildType>`` with the project's Gradle wrapper.

        Returns:
            Return code from the Gradle process
        """
        wrapper = find_gradle_wrapper(self.options.project_dir, self.options.gradle_wrapper)
        cmd = [str(wrapper.resolve()), f"assemble{build_type.task_suffix}"]

        self.log("Running Gradle", command=" ".join(cmd), cwd=str(self.options.project_dir))

        # stderr shares the stdout pipe and is drained with it
        with subprocess.Popen(
            cmd,
            cwd=str(self.options.project_dir),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        ) as process:
            for line in process.stdout:
                self.log(line.rstrip(), "debug", build_type=build_type.value)

            process.wait()

        return process.returncode

    def build(self) -> pathlib.Path:
        """Run the build invocation.

        Returns:
            The output directory

        Raises:
            BuildError: If the build fails for any reason
        """
        try:
            self.log(
                "Starting build",
                output_dir=str(self.options.output_dir),
                run_gradle=self.options.run_gradle,
            )

            descriptor = self.resolve_and_check()
            self.prepare_build_environment()
            self.write_outputs(descriptor)

            if self.options.run_gradle:
                for build_type in self.options.build_types:
                    return_code = self.run_gradle(build_type)
                    if return_code != 0:
                        raise BuildError(
                            f"Gradle assemble{build_type.task_suffix} failed with return code {return_code}",
                            details={"build_type": build_type.value, "return_code": return_code},
                        )

            self.log("Build completed successfully", output_dir=str(self.options.output_dir))
            return self.options.output_dir

        except BuildError as e:
            self.log(f"Build failed: {e}", "error")
            raise

        except Exception as e:
            self.log(f"Build failed: {str(e)}", "error")
            raise BuildError(f"Build failed: {str(e)}") from e
