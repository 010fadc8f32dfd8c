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
Error taxonomy for the framework build pipeline.

BuildFailure and MergeFailure abort the whole build. AssemblyWarning is
never raised: the assembler collects it and reports it.
"""

from typing import Optional, Sequence


class FrameworkBuildError(Exception):
    pass


class ManifestError(FrameworkBuildError):
    pass


def format_command_output(command: str, output: Sequence[str]) -> str:
    """Render a failed command and its captured output for the operator."""
    lines = "".join(f"    {line}\n" for line in output)
    return f"Build command failed: {command}\nOutput:\n{lines}"


class BuildFailure(FrameworkBuildError):
    """xcodebuild returned a non-zero exit status."""

    def __init__(self, command: str, output: Sequence[str]):
        self.command = command
        self.output = list(output)
        super().__init__(format_command_output(command, self.output))


class MergeFailure(FrameworkBuildError):
    """Merging the per-architecture binaries failed.

    ``architecture`` names the slice that could not be produced; it is
    None when the final universal merge itself failed.
    """

    def __init__(
        self,
        architecture: Optional[str],
        reason: str = "",
        command: str = "",
        output: Sequence[str] = (),
    ):
        self.architecture = architecture
        self.reason = reason
        self.command = command
        self.output = list(output)
        if architecture:
            message = f"Failed to create {architecture} slice"
        else:
            message = "Failed to create universal binary"
        if reason:
            message += f": {reason}"
        if command:
            message += "\n" + format_command_output(command, self.output)
        super().__init__(message)


class AssemblyWarning(UserWarning):
    pass
