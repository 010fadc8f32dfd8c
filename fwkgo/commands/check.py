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

import argparse
import platform
import shutil
import sys

from fwkgo.utils.cmd.cmd_util import Command, SubprocessRunner
from fwkgo.utils.context.command import CliCommand
from fwkgo.utils.context.context import CliContext
from fwkgo.utils.context.namespace import CliNameSpace

REQUIRED_TOOLS = {
    "xcodebuild": ("-version",),
    "lipo": ("-info", "/usr/lib/libSystem.B.dylib"),
    "libtool": ("-V",),
}


class Check(CliCommand):
    def description(self) -> str:
        return """
        This is a subcommand to check the Apple toolchain used by fwkgo build.

        Examples:
            fwkgo check             # Check xcodebuild, lipo and libtool
            fwkgo check --verbose   # Also print tool versions
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="fwkgo check",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--verbose",
            action="store_true",
            help="Show detailed version information",
        )
        return parser.parse_args(sys.argv[2:] if argv is None else argv, namespace=CliNameSpace())

    def exec(self, context: CliContext, args: CliNameSpace):
        print("🔍 Checking framework toolchain...\n")
        checker = ToolchainChecker(verbose=args.verbose)
        checker.check_apple()
        if not checker.print_summary():
            sys.exit(1)


class ToolchainChecker:
    def __init__(self, verbose=False, runner=None):
        self.verbose = verbose
        self.runner = runner or SubprocessRunner(timeout_second=10)
        self.results = {}
        self.warnings = []
        self.errors = []
        self.current_os = platform.system()

    def check_command_exists(self, command, version_args=()):
        """Check if a command exists in PATH"""
        if shutil.which(command) is None:
            self.print_error(f"{command}: Not found")
            return False

        version_str = ""
        if version_args:
            err_code, output = self.runner.run(Command(command, tuple(version_args)))
            if err_code == 0 and output:
                version_str = output.strip().split("\n")[0]
        self.print_ok(f"{command}: Found {version_str if self.verbose else ''}".rstrip())
        return True

    def check_apple(self):
        self.print_section("Apple toolchain")
        if self.current_os != "Darwin":
            self.print_warning("Building frameworks requires macOS")
        for tool, version_args in REQUIRED_TOOLS.items():
            self.results[tool] = self.check_command_exists(tool, version_args)
        return self.results

    def print_ok(self, msg):
        print(f"  ✅ {msg}")

    def print_error(self, msg):
        print(f"  ❌ {msg}")
        self.errors.append(msg)

    def print_warning(self, msg):
        print(f"  ⚠️  {msg}")
        self.warnings.append(msg)

    def print_section(self, title):
        print(f"\n{'='*60}")
        print(f"  {title}")
        print(f"{'='*60}")

    def print_summary(self):
        """Print the summary and return True when every tool was found."""
        self.print_section("Summary")
        ready = bool(self.results) and all(self.results.values())
        for tool, found in self.results.items():
            print(f"  {'✅' if found else '❌'} {tool}")
        if self.warnings:
            print(f"\n  Total Warnings: {len(self.warnings)}")
        if ready:
            print("\n🎉 Toolchain is ready to build frameworks!")
        else:
            print("\n💡 Install Xcode command line tools: xcode-select --install")
        return ready
