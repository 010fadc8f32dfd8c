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
Component manifest loader.

Reads Component.toml from the component's source directory:

    [component]
    name = "Widgets"
    platforms = ["ios"]
    use_framework = false
    architectures = ["arm64", "x86_64"]
    public_headers = ["Classes/**/*.h"]
    license = "LICENSE"

    [component.resource_bundles]
    Widgets = ["Assets/*.xcassets"]

    [[component.subcomponents]]
    name = "Core"
    resources = ["Core/Assets/*"]

    [build]
    project = "Pods.xcodeproj"

String values support ${VAR} and $VAR environment references.
"""

import os
import re
import sys
from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from fwkgo.utils.component.descriptor import ComponentDescriptor, DEFAULT_ARCHITECTURES
from fwkgo.utils.errors import ManifestError

MANIFEST_FILE_NAME = "Component.toml"

DEFAULT_OTHER_CFLAGS = "-fembed-bitcode -Qunused-arguments"


@dataclass(frozen=True)
class BuildSettings:
    """xcodebuild settings shared by the device and simulator builds."""
    project: str = "Pods.xcodeproj"
    configuration: str = "Release"
    simulator_sdk: str = "iphonesimulator"
    other_cflags: str = DEFAULT_OTHER_CFLAGS
    work_dir: str = "."


_ENV_BRACED = re.compile(r'\$\{([^}]+)\}')
_ENV_BARE = re.compile(r'\$([A-Za-z_][A-Za-z0-9_]*)')


def expand_env(value):
    """
    Expand environment variables in configuration values.

    Supports ${VAR_NAME} and $VAR_NAME syntax. Unknown variables are kept
    as written so that xcodebuild macros like $(inherited) pass through.
    """
    if isinstance(value, str):
        value = _ENV_BRACED.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
        return _ENV_BARE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    if isinstance(value, list):
        return [expand_env(v) for v in value]
    if isinstance(value, dict):
        return {k: expand_env(v) for k, v in value.items()}
    return value


def _as_tuple(value, key) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return tuple(value)
    raise ManifestError(f"'{key}' must be a string or a list of strings")


def _license_file(value) -> Optional[str]:
    # license = "LICENSE.txt" or license = { type = "MIT", file = "LICENSE.txt" }
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get("file")
    raise ManifestError("'license' must be a string or a table")


def parse_component(
    data: Dict[str, Any],
    platform: Optional[str] = None,
    parent: Optional[ComponentDescriptor] = None,
) -> ComponentDescriptor:
    """Build a ComponentDescriptor from a [component] table."""
    name = data.get("name")
    if not name or not isinstance(name, str):
        raise ManifestError("component 'name' is required")

    platforms = _as_tuple(data.get("platforms"), "platforms")
    if parent is None:
        platforms = platforms or ((platform,) if platform else ("ios",))
        target_platform = platform or platforms[0]
        if target_platform.lower() not in (p.lower() for p in platforms):
            raise ManifestError(f"{name} does not support platform {target_platform}")
    else:
        target_platform = parent.platform

    bundles = data.get("resource_bundles", {}) or {}
    if not isinstance(bundles, dict):
        raise ManifestError("'resource_bundles' must be a table")

    archs = _as_tuple(data.get("architectures"), "architectures")
    if parent is not None:
        archs = archs or parent.architectures

    component = ComponentDescriptor(
        name=name,
        platform=target_platform,
        available_platforms=platforms,
        module_map=data.get("module_map"),
        license_file=_license_file(data.get("license")),
        public_headers=_as_tuple(data.get("public_headers"), "public_headers"),
        resources=_as_tuple(data.get("resources"), "resources"),
        resource_bundles={
            k: _as_tuple(v, f"resource_bundles.{k}") for k, v in bundles.items()
        },
        architectures=archs or DEFAULT_ARCHITECTURES,
        use_framework=bool(
            data.get("use_framework", parent.use_framework if parent else True)
        ),
        compiler_flags=_as_tuple(data.get("compiler_flags"), "compiler_flags"),
        vendored_libraries=_as_tuple(data.get("vendored_libraries"), "vendored_libraries"),
        vendored_frameworks=_as_tuple(data.get("vendored_frameworks"), "vendored_frameworks"),
    )

    subs = data.get("subcomponents", []) or []
    if not isinstance(subs, list):
        raise ManifestError("'subcomponents' must be an array of tables")
    if subs:
        children = tuple(parse_component(s, parent=component) for s in subs)
        component = replace(component, subcomponents=children)
    return component


def parse_build_settings(data: Dict[str, Any]) -> BuildSettings:
    defaults = BuildSettings()
    return BuildSettings(
        project=data.get("project", defaults.project),
        configuration=data.get("configuration", defaults.configuration),
        simulator_sdk=data.get("simulator_sdk", defaults.simulator_sdk),
        other_cflags=data.get("other_cflags", defaults.other_cflags),
        work_dir=data.get("work_dir", defaults.work_dir),
    )


def load_manifest(path: str, platform: Optional[str] = None):
    """
    Load a component manifest.

    Args:
        path: Path to Component.toml, or a directory containing one
        platform: Target platform override (default: first declared platform)

    Returns:
        tuple: (ComponentDescriptor, BuildSettings)

    Raises:
        ManifestError: file missing, unreadable or invalid
    """
    if os.path.isdir(path):
        path = os.path.join(path, MANIFEST_FILE_NAME)
    if not os.path.isfile(path):
        raise ManifestError(f"{MANIFEST_FILE_NAME} not found at {path}")

    try:
        with open(path, "rb") as f:
            toml_data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Error reading {path}: {e}") from e

    toml_data = expand_env(toml_data)
    component_data = toml_data.get("component")
    if not isinstance(component_data, dict):
        raise ManifestError(f"[component] table missing in {path}")

    component = parse_component(component_data, platform=platform)
    settings = parse_build_settings(toml_data.get("build", {}) or {})
    return component, settings
