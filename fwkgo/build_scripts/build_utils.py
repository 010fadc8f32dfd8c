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
Toolchain and file helpers shared by the framework build steps.

This module provides:
- Static library slicing (libtool -arch_only)
- Universal binary creation and inspection (lipo)
- File operations (copy, merge directory contents, glob expansion)

Every toolchain helper takes a CommandRunner and returns
``(command, exit_code, output)`` so callers decide what a failure means.
"""

import glob
import os
import shutil

from fwkgo.utils.cmd.cmd_util import Command


def libtool_arch_only(runner, arch, src_libs, dst_lib):
    """
    Extract one architecture from a set of static libraries into a new archive.

    Runs ``libtool -arch_only <arch> -static -o <dst_lib> <src_libs...>``.
    libtool exits non-zero when none of the inputs carry the requested
    architecture.

    Args:
        runner: CommandRunner used to execute libtool
        arch: Architecture name, e.g. 'arm64'
        src_libs: Static libraries (thin or fat) to slice
        dst_lib: Output archive path

    Returns:
        tuple: (command, exit_code, output)
    """
    parent = os.path.dirname(dst_lib)
    if parent:
        os.makedirs(parent, exist_ok=True)
    cmd = Command(
        "libtool",
        ("-arch_only", arch, "-static", "-o", dst_lib, *src_libs),
    )
    err_code, output = runner.run(cmd)
    return cmd, err_code, output


def lipo_create(runner, src_libs, dst_lib):
    """
    Create a universal (fat) binary from multiple binaries.

    Runs ``lipo -create -output <dst_lib> <src_libs...>``. lipo unions the
    slices of all inputs; it is not asked to thin anything.

    Example:
        lipo_create(runner, ['libfoo.arm64.a', 'libfoo.x86_64.a'], 'libfoo.a')
    """
    parent = os.path.dirname(dst_lib)
    if parent:
        os.makedirs(parent, exist_ok=True)
    cmd = Command("lipo", ("-create", "-output", dst_lib, *src_libs))
    err_code, output = runner.run(cmd)
    return cmd, err_code, output


def lipo_info(runner, lib):
    """Describe the architectures of ``lib`` (``lipo -info``)."""
    cmd = Command("lipo", ("-info", lib))
    err_code, output = runner.run(cmd)
    return cmd, err_code, output


def copy_file(src, dst):
    """
    Copy a file or directory, creating destination directories as needed.

    If src is a directory the entire tree is copied, keeping symlinks and
    merging into an existing destination. Missing sources are ignored.
    """
    if not os.path.exists(src):
        return False
    if os.path.isdir(src):
        shutil.copytree(src, dst, symlinks=True, dirs_exist_ok=True)
    else:
        parent = os.path.dirname(dst)
        if parent:
            os.makedirs(parent, exist_ok=True)
        shutil.copy2(src, dst)
    return True


def copy_into(src, dst_dir):
    """Copy ``src`` into ``dst_dir`` keeping its base name (``cp -rp src dst_dir/``)."""
    return copy_file(src, os.path.join(dst_dir, os.path.basename(src.rstrip("/"))))


def merge_dir_contents(src_dir, dst_dir):
    """
    Copy every entry of src_dir into dst_dir, overwriting clashes.

    Equivalent to ``cp -fRap src_dir/* dst_dir/``.

    Returns:
        list: names that were copied
    """
    if not os.path.isdir(src_dir):
        return []
    os.makedirs(dst_dir, exist_ok=True)
    copied = []
    for name in sorted(os.listdir(src_dir)):
        copy_into(os.path.join(src_dir, name), dst_dir)
        copied.append(name)
    return copied


def expand_paths(source_dir, patterns):
    """
    Expand glob patterns rooted at source_dir.

    ``**`` matches across directories. The result is sorted and free of
    duplicates; patterns that match nothing contribute nothing.
    """
    matches = []
    for pattern in patterns:
        matches.extend(sorted(glob.glob(os.path.join(source_dir, pattern), recursive=True)))
    return list(dict.fromkeys(matches))


def resolve_path(source_dir, path):
    if os.path.isabs(path):
        return path
    return os.path.join(source_dir, path)
