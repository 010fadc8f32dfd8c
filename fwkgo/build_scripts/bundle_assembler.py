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
Populate the output bundle around the merged binary.

Four steps, run in this order by the coordinator:

1. headers and module map
2. license
3. resource bundles produced by the device build
4. loose resource files

None of them fails the build. Anything declared but missing is recorded as
an AssemblyWarning and reported.
"""

import glob
import os
from typing import List, Optional

from fwkgo.build_scripts.build_utils import (
    copy_into,
    expand_paths,
    merge_dir_contents,
    resolve_path,
)
from fwkgo.utils.errors import AssemblyWarning

MODULE_MAP_TEMPLATE = """framework module {name} {{
  umbrella header "{name}.h"

  export *
  module * {{ export * }}
}}
"""


def default_module_map(name):
    """Module map exporting everything through the umbrella header ``<name>.h``."""
    return MODULE_MAP_TEMPLATE.format(name=name)


class BundleAssembler:
    def __init__(
        self,
        component,
        paths,
        reporter,
        source_dir=".",
        device_build_dir="build",
        simulator_build_dir="build-simulator",
    ):
        self.component = component
        self.paths = paths
        self.reporter = reporter
        self.source_dir = source_dir
        self.device_build_dir = device_build_dir
        self.simulator_build_dir = simulator_build_dir
        self.warnings: List[AssemblyWarning] = []

    def warn(self, text):
        self.warnings.append(AssemblyWarning(text))
        self.reporter.warning(text)

    def assemble(self):
        if self.component.use_framework:
            self.copy_headers_static()
        else:
            self.copy_headers()
        self.copy_license()
        self.copy_resources()

    # headers

    def public_headers(self) -> List[str]:
        headers = expand_paths(self.source_dir, self.component.header_patterns())
        return [h for h in headers if os.path.isfile(h)]

    def copy_headers(self):
        public_headers = self.public_headers()
        header_names = [os.path.basename(h) for h in public_headers]
        self.reporter.message(f"Copying public headers {header_names}")
        os.makedirs(self.paths.headers_path, exist_ok=True)
        for header in public_headers:
            copy_into(header, self.paths.headers_path)

        module_map = self.module_map(header_names)
        if module_map is not None:
            self.reporter.message(f"Writing module map {module_map}")
            self.paths.ensure_module_map_path()
            with open(self.paths.module_map_file, "w") as f:
                f.write(module_map)
        return header_names

    def module_map(self, header_names) -> Optional[str]:
        """
        The explicit module map if declared and present, else a synthesised
        one when a header named ``<name>.h`` is public, else None.
        """
        if self.component.module_map is not None:
            module_map_file = resolve_path(self.source_dir, self.component.module_map)
            if os.path.isfile(module_map_file):
                with open(module_map_file) as f:
                    return f.read()
            self.warn(f"Module map {self.component.module_map} not found")
            return None
        if f"{self.component.name}.h" in header_names:
            return default_module_map(self.component.name)
        return None

    def copy_headers_static(self):
        """
        copy_headers, then merge Headers and Modules from both intermediate
        frameworks. Device content wins over simulator content.
        """
        self.copy_headers()

        name = self.component.name
        device_fwk = os.path.join(self.device_build_dir, f"{name}.framework")
        simulator_fwk = os.path.join(self.simulator_build_dir, f"{name}.framework")

        build_headers = os.path.join(device_fwk, "Headers")
        if os.path.isdir(build_headers):
            merge_dir_contents(os.path.join(simulator_fwk, "Headers"), self.paths.headers_path)
            merge_dir_contents(build_headers, self.paths.headers_path)

        build_modules = os.path.join(device_fwk, "Modules")
        if os.path.isdir(build_modules):
            self.paths.ensure_module_map_path()
            merge_dir_contents(os.path.join(simulator_fwk, "Modules"), self.paths.module_map_path)
            merge_dir_contents(build_modules, self.paths.module_map_path)

    # license

    def copy_license(self):
        """
        Copy the license file into the bundle root.

        The license lands next to Versions/ and Headers/ inside
        <Name>.framework, not in the process working directory, so it is
        published together with the bundle.
        """
        self.reporter.message("Copying license")
        license_file = resolve_path(self.source_dir, self.component.license_path)
        if os.path.isfile(license_file):
            copy_into(license_file, self.paths.license_root)
            return True
        self.warn(f"License file {self.component.license_path} not found")
        return False

    # resources

    def resource_bundles(self) -> List[str]:
        bundle_names = self.component.resource_bundle_names()
        bundles = sorted(glob.glob(os.path.join(self.device_build_dir, "*.bundle")))
        found = [
            b for b in bundles if os.path.splitext(os.path.basename(b))[0] in bundle_names
        ]
        found_names = {os.path.splitext(os.path.basename(b))[0] for b in found}
        for missing in bundle_names:
            if missing not in found_names:
                self.warn(f"Resource bundle {missing}.bundle not found in build output")
        return found

    def resource_files(self) -> List[str]:
        return expand_paths(self.source_dir, self.component.resource_patterns())

    def copy_resources(self):
        """
        Copy resource bundles and loose resources.

        If nothing is copied the Resources directory is removed, never left
        empty.
        """
        bundles = self.resource_bundles()
        resources = self.resource_files()

        if not bundles and not resources:
            self.paths.delete_resources()
            return []

        self.paths.ensure_resources_path()
        if bundles:
            self.reporter.message(f"Copying bundle files {[os.path.basename(b) for b in bundles]}")
            for bundle in bundles:
                copy_into(bundle, self.paths.resources_path)
        if resources:
            self.reporter.message(f"Copying resources {[os.path.basename(r) for r in resources]}")
            for resource in resources:
                copy_into(resource, self.paths.resources_path)
        return bundles + resources
