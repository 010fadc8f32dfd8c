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
Component descriptor: the immutable description of the unit being packaged.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

DEFAULT_LICENSE_FILE = "LICENSE"
DEFAULT_ARCHITECTURES = ("arm64", "x86_64")

# Display names used by Xcode target names, e.g. Widgets-iOS
PLATFORM_DISPLAY_NAMES = {
    "ios": "iOS",
    "osx": "macOS",
    "macos": "macOS",
    "tvos": "tvOS",
    "watchos": "watchOS",
    "visionos": "visionOS",
}


def platform_display_name(platform: str) -> str:
    return PLATFORM_DISPLAY_NAMES.get(platform.lower(), platform)


@dataclass(frozen=True)
class ComponentDescriptor:
    name: str
    platform: str = "ios"
    available_platforms: Tuple[str, ...] = ("ios",)
    module_map: Optional[str] = None
    license_file: Optional[str] = None
    public_headers: Tuple[str, ...] = ()
    resources: Tuple[str, ...] = ()
    resource_bundles: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    subcomponents: Tuple["ComponentDescriptor", ...] = ()
    architectures: Tuple[str, ...] = DEFAULT_ARCHITECTURES
    use_framework: bool = True
    compiler_flags: Tuple[str, ...] = ()
    vendored_libraries: Tuple[str, ...] = ()
    vendored_frameworks: Tuple[str, ...] = ()

    @property
    def target_name(self) -> str:
        """Xcode target name, suffixed with the platform when several are supported."""
        if len(self.available_platforms) > 1:
            return f"{self.name}-{platform_display_name(self.platform)}"
        return self.name

    @property
    def license_path(self) -> str:
        return self.license_file or DEFAULT_LICENSE_FILE

    def supports(self, platform: str) -> bool:
        # no explicit platform list means "inherit the parent's"
        if not self.available_platforms:
            return True
        return platform.lower() in (p.lower() for p in self.available_platforms)

    def recursive_subcomponents(self) -> Iterator["ComponentDescriptor"]:
        for sub in self.subcomponents:
            yield sub
            yield from sub.recursive_subcomponents()

    def consumers(self, platform: Optional[str] = None) -> List["ComponentDescriptor"]:
        """The component and every nested subcomponent that applies to ``platform``."""
        platform = platform or self.platform
        specs = [self, *self.recursive_subcomponents()]
        return [s for s in specs if s is self or s.supports(platform)]

    def resource_bundle_names(self, platform: Optional[str] = None) -> List[str]:
        names = []
        for consumer in self.consumers(platform):
            names.extend(consumer.resource_bundles.keys())
            for resource in consumer.resources:
                base, ext = os.path.splitext(os.path.basename(resource.rstrip("/")))
                if ext == ".bundle":
                    names.append(base)
        return list(dict.fromkeys(names))

    def resource_patterns(self, platform: Optional[str] = None) -> List[str]:
        patterns = []
        for consumer in self.consumers(platform):
            patterns.extend(consumer.resources)
        return list(dict.fromkeys(patterns))

    def header_patterns(self) -> List[str]:
        patterns = []
        for consumer in self.consumers():
            patterns.extend(consumer.public_headers)
        return list(dict.fromkeys(patterns))

    def vendored_artifacts(self) -> List[str]:
        """Prebuilt binaries folded into the merge; frameworks before libraries."""
        frameworks, libraries = [], []
        for consumer in self.consumers():
            for framework in consumer.vendored_frameworks:
                framework = framework.rstrip("/")
                binary_name = os.path.splitext(os.path.basename(framework))[0]
                frameworks.append(os.path.join(framework, binary_name))
            libraries.extend(consumer.vendored_libraries)
        return list(dict.fromkeys(frameworks + libraries))
