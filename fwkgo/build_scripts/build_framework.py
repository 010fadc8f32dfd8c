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
Static framework build for one component.

The build runs strictly in sequence, each step consuming the file system
output of the previous one:

1. Build device libraries with xcodebuild (build/)
2. Build simulator libraries with the same defines (build-simulator/)
3. Merge device, simulator and vendored binaries into a universal binary
4. Assemble headers, module map, license and resources around it
5. Publish <Name>.framework into the component's source directory

Any BuildFailure or MergeFailure aborts the build before publishing.

Output:
    - Bundle: <work_dir>/<platform>/<Name>.framework
    - Published copy: <source_dir>/<Name>.framework
"""

import os
import shutil
from enum import Enum

from fwkgo.build_scripts.arch_merger import ArchitectureMerger
from fwkgo.build_scripts.bundle_assembler import BundleAssembler
from fwkgo.build_scripts.framework_paths import ArtifactPaths
from fwkgo.build_scripts.xcodebuild import BuildConfiguration, XcodeBuild
from fwkgo.utils.cmd.cmd_util import SubprocessRunner
from fwkgo.utils.component.config import BuildSettings
from fwkgo.utils.errors import FrameworkBuildError
from fwkgo.utils.report.reporter import Reporter


class BuildState(Enum):
    INIT = "init"
    DEVICE_BUILT = "device_built"
    SIMULATOR_BUILT = "simulator_built"
    MERGED = "merged"
    ASSEMBLED = "assembled"
    PUBLISHED = "published"
    FAILED = "failed"


class FrameworkBuilder:
    def __init__(
        self,
        component,
        source_dir,
        settings=None,
        runner=None,
        reporter=None,
        work_dir=None,
    ):
        self.component = component
        self.source_dir = os.path.abspath(source_dir)
        self.settings = settings or BuildSettings()
        self.runner = runner or SubprocessRunner()
        self.reporter = reporter or Reporter()
        self.work_dir = os.path.abspath(work_dir or self.settings.work_dir)
        self.state = BuildState.INIT
        self.paths = None
        self.binary_path = None
        self.assembler = None

        self.xcodebuild = XcodeBuild(
            component, self.settings, self.runner, self.reporter, self.work_dir
        )
        self.device = BuildConfiguration.device(
            self.work_dir, component.architectures, self.settings.other_cflags
        )
        self.simulator = BuildConfiguration.simulator(
            self.work_dir, self.settings.simulator_sdk
        )

    @property
    def publish_path(self):
        return os.path.join(self.source_dir, f"{self.component.name}.framework")

    def build(self):
        """
        Run the whole pipeline.

        Returns:
            str: the published framework path

        Raises:
            FrameworkBuildError: a build or merge step failed; nothing was
                published and ``state`` is FAILED.
        """
        with self.reporter.section(f"Building static framework {self.component.name}"):
            try:
                defines = self.compile()
                self.build_sim_libraries(defines)
                self.merge()
                self.assemble()
                self.cp_to_source_dir()
            except FrameworkBuildError:
                self.state = BuildState.FAILED
                raise
        return self.publish_path

    def compile(self):
        defines = self.xcodebuild.defines()
        self.xcodebuild.invoke(self.device, defines)
        self.state = BuildState.DEVICE_BUILT
        return defines

    def build_sim_libraries(self, defines):
        self.reporter.message("Building simulator libraries")
        self.xcodebuild.invoke(self.simulator, defines)
        self.state = BuildState.SIMULATOR_BUILT

    def merge(self):
        self.paths = ArtifactPaths.make(
            self.component.name, self.component.platform, self.work_dir
        )
        merger = ArchitectureMerger(
            self.component,
            self.paths,
            self.runner,
            self.reporter,
            work_dir=self.work_dir,
            source_dir=self.source_dir,
        )
        self.binary_path = merger.merge(self.device.build_dir, self.simulator.build_dir)
        self.state = BuildState.MERGED

    def assemble(self):
        self.assembler = BundleAssembler(
            self.component,
            self.paths,
            self.reporter,
            source_dir=self.source_dir,
            device_build_dir=self.device.build_dir,
            simulator_build_dir=self.simulator.build_dir,
        )
        self.assembler.assemble()
        self.state = BuildState.ASSEMBLED

    def cp_to_source_dir(self):
        """
        Replace <source_dir>/<Name>.framework with the fresh bundle.

        The copy goes to a sibling temp directory first and is renamed into
        place, so an interrupted copy never sits at the target path.
        """
        target_dir = self.publish_path
        staging_dir = target_dir + ".tmp"
        if os.path.exists(staging_dir):
            shutil.rmtree(staging_dir)
        shutil.copytree(self.paths.fwk_path, staging_dir, symlinks=True)
        if os.path.exists(target_dir):
            shutil.rmtree(target_dir)
        os.rename(staging_dir, target_dir)
        self.reporter.message(f"Published {target_dir}")
        self.state = BuildState.PUBLISHED
        return target_dir
