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
Canonical locations inside the output bundle.

    <work_dir>/<platform>/<Name>.framework/
        Versions/<Name>          merged binary
        Headers/*.h
        Modules/module.modulemap
        Resources/*
        LICENSE
"""

import os
import shutil
from dataclasses import dataclass

MODULE_MAP_FILE_NAME = "module.modulemap"


@dataclass(frozen=True)
class ArtifactPaths:
    name: str
    platform: str
    root_path: str
    fwk_path: str
    versions_path: str
    headers_path: str
    module_map_path: str
    resources_path: str

    @property
    def binary_path(self):
        return os.path.join(self.versions_path, self.name)

    @property
    def module_map_file(self):
        return os.path.join(self.module_map_path, MODULE_MAP_FILE_NAME)

    @property
    def license_root(self):
        return self.fwk_path

    @classmethod
    def for_component(cls, name, platform, work_dir="."):
        """Compute the paths without touching the file system."""
        root_path = os.path.join(os.path.abspath(work_dir), platform)
        fwk_path = os.path.join(root_path, f"{name}.framework")
        return cls(
            name=name,
            platform=platform,
            root_path=root_path,
            fwk_path=fwk_path,
            versions_path=os.path.join(fwk_path, "Versions"),
            headers_path=os.path.join(fwk_path, "Headers"),
            module_map_path=os.path.join(fwk_path, "Modules"),
            resources_path=os.path.join(fwk_path, "Resources"),
        )

    @classmethod
    def make(cls, name, platform, work_dir="."):
        """
        Create a fresh bundle skeleton and return its paths.

        The platform root is created if missing and otherwise left alone;
        only a <Name>.framework left over from a previous run is removed.
        The Modules directory is only created when a module map is written.
        """
        paths = cls.for_component(name, platform, work_dir)
        os.makedirs(paths.root_path, exist_ok=True)
        if os.path.exists(paths.fwk_path):
            shutil.rmtree(paths.fwk_path)
        for path in (paths.versions_path, paths.headers_path, paths.resources_path):
            os.makedirs(path, exist_ok=True)
        return paths

    def ensure_module_map_path(self):
        os.makedirs(self.module_map_path, exist_ok=True)
        return self.module_map_path

    def ensure_resources_path(self):
        os.makedirs(self.resources_path, exist_ok=True)
        return self.resources_path

    def delete_resources(self):
        if os.path.exists(self.resources_path):
            shutil.rmtree(self.resources_path)
