"""Pytest fixtures for the fwkgo test suite."""

import io
import os
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional

import pytest

from fwkgo.utils.cmd.cmd_util import CommandRunner
from fwkgo.utils.component.descriptor import ComponentDescriptor
from fwkgo.utils.report.reporter import Reporter


def write_binary(path, archs: Iterable[str], payload: str = "") -> Path:
    """A fake Mach-O: one architecture per line, optional payload per slice."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{arch}{':' + payload if payload else ''}\n" for arch in archs))
    return path


def read_slices(path) -> Dict[str, str]:
    slices = {}
    for line in Path(path).read_text().splitlines():
        arch, _, payload = line.partition(":")
        slices[arch] = payload
    return slices


def read_archs(path) -> List[str]:
    return sorted(read_slices(path))


class FakeToolchain(CommandRunner):
    """
    Emulates xcodebuild, libtool -arch_only and lipo on text "binaries".

    ``products`` maps "device"/"simulator" to a callable receiving the
    build directory; it creates whatever that build would produce.
    ``fail`` maps a variant to (exit_code, output) to simulate a failed build.
    """

    def __init__(self, products=None, fail=None):
        self.products: Dict[str, Callable[[Path], None]] = products or {}
        self.fail: Dict[str, tuple] = fail or {}
        self.commands = []

    def run(self, command):
        self.commands.append(command)
        handler = getattr(self, f"_{command.program}", None)
        if handler is None:
            return 127, f"{command.program}: command not found"
        return handler(list(command.args))

    def programs(self) -> List[str]:
        return [c.program for c in self.commands]

    def xcodebuild_commands(self):
        return [c for c in self.commands if c.program == "xcodebuild"]

    def _xcodebuild(self, args):
        build_dir = next(
            a.split("=", 1)[1] for a in args if a.startswith("CONFIGURATION_BUILD_DIR=")
        )
        variant = "simulator" if "-sdk" in args else "device"
        if variant in self.fail:
            return self.fail[variant]
        os.makedirs(build_dir, exist_ok=True)
        product = self.products.get(variant)
        if product:
            product(Path(build_dir))
        return 0, f"** BUILD SUCCEEDED ** ({variant})\n"

    def _libtool(self, args):
        arch = args[args.index("-arch_only") + 1]
        output = args[args.index("-o") + 1]
        inputs = args[args.index("-o") + 2:]
        for lib in inputs:
            if not os.path.isfile(lib):
                return 1, f"libtool: can't open file: {lib}\n"
        slices = {}
        for lib in inputs:
            slices.update(read_slices(lib))
        if arch not in slices:
            return 1, f"libtool: file(s) do not contain architecture: {arch}\n"
        Path(output).write_text(f"{arch}:{slices[arch]}\n" if slices[arch] else f"{arch}\n")
        return 0, ""

    def _lipo(self, args):
        if args[0] == "-info":
            if not os.path.isfile(args[1]):
                return 1, f"fatal error: lipo: can't open input file: {args[1]}\n"
            archs = " ".join(read_archs(args[1]))
            return 0, f"Architectures in the fat file: {args[1]} are: {archs}\n"
        output = args[args.index("-output") + 1]
        inputs = [a for a in args[args.index("-output") + 2:]]
        slices = {}
        for lib in inputs:
            if not os.path.isfile(lib):
                return 1, f"fatal error: lipo: can't open input file: {lib}\n"
            slices.update(read_slices(lib))
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(
            "".join(f"{a}:{p}\n" if p else f"{a}\n" for a, p in sorted(slices.items()))
        )
        return 0, ""


def framework_product(name, archs, headers: Optional[Dict[str, str]] = None, bundles=()):
    """Product callable for a framework build: <Name>.framework/<Name> (+Headers, bundles)."""

    def make(build_dir: Path):
        fwk = build_dir / f"{name}.framework"
        write_binary(fwk / name, archs)
        for header, text in (headers or {}).items():
            (fwk / "Headers").mkdir(parents=True, exist_ok=True)
            (fwk / "Headers" / header).write_text(text)
        for bundle in bundles:
            (build_dir / bundle).mkdir(parents=True, exist_ok=True)
            (build_dir / bundle / "Info.plist").write_text("<plist/>")

    return make


def library_product(target_name, archs, payload=""):
    """Product callable for a static library build: lib<target>.a."""

    def make(build_dir: Path):
        write_binary(build_dir / f"lib{target_name}.a", archs, payload)

    return make


@pytest.fixture
def reporter() -> Reporter:
    return Reporter(stream=io.StringIO(), verbose=True)


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "src"
    path.mkdir()
    return path


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    path = tmp_path / "work"
    path.mkdir()
    return path


@pytest.fixture
def widgets() -> ComponentDescriptor:
    return ComponentDescriptor(
        name="Widgets",
        platform="ios",
        available_platforms=("ios",),
        public_headers=("Classes/*.h",),
        architectures=("arm64", "x86_64"),
        use_framework=False,
    )
