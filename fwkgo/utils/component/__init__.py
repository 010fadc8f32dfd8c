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

"""Component descriptor and manifest loading."""

from .descriptor import ComponentDescriptor
from .config import BuildSettings, load_manifest

__all__ = ["ComponentDescriptor", "BuildSettings", "load_manifest"]
