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
Merge device, simulator and vendored binaries into one universal binary.

Two strategies, chosen by ComponentDescriptor.use_framework:

- framework: lipo every framework-embedded binary straight into the output.
  No thinning; lipo unions whatever slices the inputs carry.
- static library: for each supported architecture, slice a single
  architecture archive out of all inputs with ``libtool -arch_only``
  (build/package-<arch>.a), then lipo the slices together.

When two inputs carry the same architecture, which one ends up in the
output is decided by lipo and is not guaranteed.
"""

import glob
import os
from typing import List, Sequence

from fwkgo.build_scripts.build_utils import (
    libtool_arch_only,
    lipo_create,
    lipo_info,
    resolve_path,
)
from fwkgo.utils.errors import MergeFailure


class ArchitectureMerger:
    def __init__(self, component, paths, runner, reporter, work_dir=".", source_dir="."):
        self.component = component
        self.paths = paths
        self.runner = runner
        self.reporter = reporter
        self.work_dir = work_dir
        self.source_dir = source_dir

    def static_libs_in_sandbox(self, build_dir) -> List[str]:
        name = self.component.name
        if self.component.use_framework:
            pattern = os.path.join(build_dir, f"{name}.framework", name)
        else:
            pattern = os.path.join(build_dir, f"lib{self.component.target_name}.a")
        return sorted(glob.glob(pattern))

    def vendored_libraries(self) -> List[str]:
        """
        Declared prebuilt binaries, resolved against the source directory.

        Raises:
            MergeFailure: a declared binary does not exist
        """
        libs = []
        for artifact in self.component.vendored_artifacts():
            path = resolve_path(self.source_dir, artifact)
            if not os.path.isfile(path):
                raise MergeFailure(None, f"vendored binary {path} not found")
            libs.append(path)
        return libs

    def collect_inputs(self, device_dir, simulator_dir) -> List[str]:
        return (
            self.static_libs_in_sandbox(device_dir)
            + self.static_libs_in_sandbox(simulator_dir)
            + self.vendored_libraries()
        )

    def merge(self, device_dir, simulator_dir) -> str:
        """
        Produce the universal binary at paths.binary_path.

        Returns:
            str: the merged binary path

        Raises:
            MergeFailure: a slice or the final binary could not be produced
        """
        static_libs = self.collect_inputs(device_dir, simulator_dir)
        self.reporter.message(
            f"Building {self.component.platform} libraries with archs "
            f"{list(self.component.architectures)}"
        )
        output = self.paths.binary_path
        if self.component.use_framework:
            self.build_static_framework(output, static_libs)
        else:
            self.build_static_library(output, static_libs)

        if not os.path.isfile(output):
            raise MergeFailure(None, f"{output} was not produced")
        self.verify(output)
        return output

    def build_static_framework(self, output, static_libs: Sequence[str]):
        if not static_libs:
            raise MergeFailure(None, "no framework binaries found to merge")
        self._lipo(output, static_libs)

    def build_static_library(self, output, static_libs: Sequence[str]):
        libs = []
        for arch in self.component.architectures:
            if not static_libs:
                raise MergeFailure(arch, "no static libraries found to slice")
            library = os.path.join(self.work_dir, "build", f"package-{arch}.a")
            if os.path.exists(library):
                os.remove(library)
            cmd, err_code, out = libtool_arch_only(self.runner, arch, static_libs, library)
            if err_code != 0:
                raise MergeFailure(arch, "libtool failed", str(cmd), out.splitlines())
            if not os.path.isfile(library):
                raise MergeFailure(arch, f"{library} was not produced", str(cmd))
            libs.append(library)
        self._lipo(output, libs)

    def _lipo(self, output, libs):
        cmd, err_code, out = lipo_create(self.runner, libs, output)
        if err_code != 0:
            raise MergeFailure(None, "lipo failed", str(cmd), out.splitlines())

    def verify(self, output):
        cmd, err_code, out = lipo_info(self.runner, output)
        if err_code != 0:
            self.reporter.warning(f"Unable to inspect {output}: {out.strip()}")
        else:
            self.reporter.message(out.strip())
