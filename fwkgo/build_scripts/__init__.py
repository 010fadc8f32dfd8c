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

"""Framework build pipeline: build, merge, assemble, publish."""

__all__ = [
    "arch_merger",
    "build_framework",
    "build_utils",
    "bundle_assembler",
    "framework_paths",
    "xcodebuild",
]
