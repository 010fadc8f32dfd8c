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
import importlib
import os
import sys

from fwkgo.utils.context.command import CliCommand
from fwkgo.utils.context.context import CliContext
from fwkgo.utils.context.namespace import CliNameSpace

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """fwkgo - Static framework builder for Apple platforms

Builds one component with xcodebuild for device and simulator, merges the
binaries into a universal static framework or static library and assembles
headers, module map, license and resources around it.

USAGE:
    fwkgo <command> [options]

COMMANDS:
    build       Build <Name>.framework from Component.toml
    check       Check xcodebuild, lipo and libtool

EXAMPLES:
    fwkgo check
    fwkgo build --source-dir Widgets
    fwkgo build --static-library --arch arm64,x86_64

For more information on a specific command:
    fwkgo <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _parser(self, add_help):
        parser = argparse.ArgumentParser(
            prog="fwkgo",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs="?" if not add_help else None,
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        argv = sys.argv[1:] if argv is None else argv
        # fwkgo --help, but not fwkgo build --help
        if len(argv) == 1 and argv[0] in ["--help", "-h"]:
            self._parser(add_help=True).print_help()
            sys.exit(0)

        args, _ = self._parser(add_help=False).parse_known_args(argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace, argv=None):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._parser(add_help=True).print_help()
            sys.exit(1)

        argv = sys.argv[2:] if argv is None else argv
        module = importlib.import_module(f"fwkgo.commands.{args.subcommand}")
        klass = getattr(module, args.subcommand.capitalize())
        sub_cmd = klass()
        return sub_cmd.exec(context, sub_cmd.cli(argv))


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    cmd = Cli()
    return cmd.exec(CliContext(), cmd.cli(argv), argv[1:])


if __name__ == "__main__":
    main()
