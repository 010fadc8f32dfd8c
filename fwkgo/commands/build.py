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
import os
import sys
from dataclasses import replace

from fwkgo.build_scripts.build_framework import FrameworkBuilder
from fwkgo.utils.component.config import MANIFEST_FILE_NAME, load_manifest
from fwkgo.utils.context.command import CliCommand
from fwkgo.utils.context.context import CliContext
from fwkgo.utils.context.namespace import CliNameSpace
from fwkgo.utils.errors import FrameworkBuildError
from fwkgo.utils.report.reporter import Reporter


class Build(CliCommand):
    def description(self) -> str:
        return f"""
        This is a subcommand to build a static framework for one component.

        The component is described by {MANIFEST_FILE_NAME} in its source
        directory. xcodebuild is run for the device and the simulator, the
        results are merged with libtool/lipo and the finished
        <Name>.framework is copied back into the source directory.

        Examples:
            fwkgo build                              # Build ./{MANIFEST_FILE_NAME}
            fwkgo build --source-dir Widgets         # Build Widgets/{MANIFEST_FILE_NAME}
            fwkgo build --static-library             # Merge per-arch static libraries
            fwkgo build --arch arm64,x86_64          # Override architectures
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="fwkgo build",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--source-dir",
            default=".",
            help="Component source directory, publish target (default: .)",
        )
        parser.add_argument(
            "--manifest",
            default=None,
            help=f"Path to the manifest (default: <source-dir>/{MANIFEST_FILE_NAME})",
        )
        parser.add_argument(
            "--work-dir",
            default=None,
            help="Directory holding Pods.xcodeproj and build output (default: from manifest)",
        )
        parser.add_argument(
            "--platform",
            default=None,
            help="Target platform (default: first platform of the component)",
        )
        parser.add_argument(
            "--arch",
            default=None,
            help="Comma separated architectures, e.g. arm64,x86_64",
        )
        parser.add_argument(
            "--project",
            default=None,
            help="Xcode project to build (default: Pods.xcodeproj)",
        )
        link = parser.add_mutually_exclusive_group()
        link.add_argument(
            "--framework",
            dest="use_framework",
            action="store_const",
            const=True,
            default=None,
            help="Merge framework binaries (default from manifest)",
        )
        link.add_argument(
            "--static-library",
            dest="use_framework",
            action="store_const",
            const=False,
            help="Slice and merge static libraries per architecture",
        )
        parser.add_argument(
            "-q",
            "--quiet",
            action="store_true",
            help="Only print warnings and errors",
        )
        args = parser.parse_args(sys.argv[2:] if argv is None else argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        reporter = Reporter(verbose=not args.quiet)
        source_dir = os.path.join(context.home_path, args.source_dir)
        manifest = args.manifest or source_dir

        try:
            component, settings = load_manifest(manifest, platform=args.platform)
            component_changes = {}
            if args.arch:
                component_changes["architectures"] = tuple(
                    a.strip() for a in args.arch.split(",") if a.strip()
                )
            if args.use_framework is not None:
                component_changes["use_framework"] = args.use_framework
            if component_changes:
                component = replace(component, **component_changes)
            if args.project:
                settings = replace(settings, project=args.project)

            work_dir = args.work_dir or os.path.join(context.home_path, settings.work_dir)
            builder = FrameworkBuilder(
                component,
                source_dir,
                settings=settings,
                reporter=reporter,
                work_dir=work_dir,
            )
            output = builder.build()
        except FrameworkBuildError as e:
            reporter.error(str(e))
            reporter.error("Framework build failed. Stopping immediately.")
            sys.exit(1)

        print("==================Output========================")
        print(output)
        return output
