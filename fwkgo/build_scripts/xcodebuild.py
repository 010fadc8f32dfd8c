#
# Copyright 2024 fwkgo Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""
xcodebuild invocation for one build configuration (device or simulator).

The command line mirrors what a CocoaPods generated project expects:

    xcodebuild GCC_PREPROCESSOR_DEFINITIONS='$(inherited)' <compiler flags>
        <configuration args> CONFIGURATION_BUILD_DIR=<build dir>
        clean build -configuration Release -target <target> -project ./Pods.xcodeproj
"""

import os
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from fwkgo.utils.cmd.cmd_util import Command
from fwkgo.utils.errors import BuildFailure

INHERITED_DEFINES = "GCC_PREPROCESSOR_DEFINITIONS=$(inherited)"

DEVICE = "device"
SIMULATOR = "simulator"


@dataclass(frozen=True)
class BuildConfiguration:
    variant: str  # DEVICE or SIMULATOR
    build_dir: str
    args: Tuple[str, ...] = ()

    @classmethod
    def device(cls, work_dir, architectures, other_cflags):
        args = [f"ARCHS={' '.join(architectures)}"]
        if other_cflags:
            args.append(f"OTHER_CFLAGS={other_cflags}")
        return cls(DEVICE, os.path.join(work_dir, "build"), tuple(args))

    @classmethod
    def simulator(cls, work_dir, sdk="iphonesimulator"):
        return cls(SIMULATOR, os.path.join(work_dir, "build-simulator"), ("-sdk", sdk))


class XcodeBuild:
    def __init__(self, component, settings, runner, reporter, work_dir="."):
        self.component = component
        self.settings = settings
        self.runner = runner
        self.reporter = reporter
        self.work_dir = work_dir

    def defines(self) -> List[str]:
        """Preprocessor definitions plus the component's compiler flags."""
        return [INHERITED_DEFINES, *self.component.compiler_flags]

    def command(
        self,
        configuration: BuildConfiguration,
        defines: Sequence[str] = (),
        args: Sequence[str] = (),
    ) -> Command:
        project = self.settings.project
        if not os.path.isabs(project):
            project = os.path.join(".", project)
        return Command(
            "xcodebuild",
            (
                *defines,
                *configuration.args,
                *args,
                f"CONFIGURATION_BUILD_DIR={configuration.build_dir}",
                "clean",
                "build",
                "-configuration",
                self.settings.configuration,
                "-target",
                self.component.target_name,
                "-project",
                project,
            ),
            cwd=self.work_dir,
        )

    def invoke(
        self,
        configuration: BuildConfiguration,
        defines: Sequence[str] = (),
        args: Sequence[str] = (),
    ) -> List[str]:
        """
        Run xcodebuild and return its combined output as lines.

        Raises:
            BuildFailure: xcodebuild exited non-zero.
        """
        cmd = self.command(configuration, defines, args)
        self.reporter.message(f"Building {configuration.variant} libraries: {cmd}")
        err_code, output = self.runner.run(cmd)
        lines = output.splitlines()
        if err_code != 0:
            raise BuildFailure(str(cmd), lines)
        return lines
