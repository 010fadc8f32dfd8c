"""Tests for the fwkgo command line."""

import io
import os

import pytest

from conftest import FakeToolchain, library_product, read_archs
from fwkgo import cli
from fwkgo.commands import check
from fwkgo.commands.build import Build
from fwkgo.utils.context.context import CliContext

MANIFEST = """
[component]
name = "Widgets"
use_framework = true
public_headers = ["Classes/*.h"]
"""


@pytest.fixture
def component_dir(tmp_path):
    src = tmp_path / "Widgets"
    (src / "Classes").mkdir(parents=True)
    (src / "Classes" / "Widgets.h").write_text("// Widgets")
    (src / "LICENSE").write_text("MIT")
    (src / "Component.toml").write_text(MANIFEST)
    return src


@pytest.fixture
def fake_runner(monkeypatch):
    runner = FakeToolchain(
        products={
            "device": library_product("Widgets", ["arm64"]),
            "simulator": library_product("Widgets", ["x86_64"]),
        }
    )
    monkeypatch.setattr(
        "fwkgo.build_scripts.build_framework.SubprocessRunner", lambda: runner
    )
    return runner


def test_command_list():
    assert cli.Cli().get_command_list() == ["build", "check"]


def test_build_options():
    args = Build().cli(["--source-dir", "Widgets", "--arch", "arm64", "--static-library", "-q"])

    assert args.source_dir == "Widgets"
    assert args.arch == "arm64"
    assert args.use_framework is False
    assert args.quiet is True
    assert Build().cli([]).use_framework is None


def test_build_command_publishes_framework(tmp_path, component_dir, fake_runner, capsys):
    args = Build().cli([
        "--source-dir", "Widgets",
        "--work-dir", str(tmp_path / "work"),
        "--static-library",
    ])

    output = Build().exec(CliContext(str(tmp_path)), args)

    assert output == os.path.join(str(component_dir), "Widgets.framework")
    assert read_archs(os.path.join(output, "Versions", "Widgets")) == ["arm64", "x86_64"]
    assert "==================Output========================" in capsys.readouterr().out
    xcodebuild = fake_runner.xcodebuild_commands()
    assert all(c.cwd == str(tmp_path / "work") for c in xcodebuild)


def test_build_arch_override(tmp_path, component_dir, fake_runner):
    args = Build().cli([
        "--source-dir", "Widgets",
        "--work-dir", str(tmp_path / "work"),
        "--static-library",
        "--arch", "arm64, x86_64",
        "--project", "Widgets.xcodeproj",
    ])

    Build().exec(CliContext(str(tmp_path)), args)

    device = fake_runner.xcodebuild_commands()[0]
    assert "ARCHS=arm64 x86_64" in device.args
    assert device.args[-1] == "./Widgets.xcodeproj"


def test_build_failure_exits_with_status_1(tmp_path, component_dir, monkeypatch, capsys):
    runner = FakeToolchain(fail={"device": (65, "error: Widgets.m:3\n")})
    monkeypatch.setattr("fwkgo.build_scripts.build_framework.SubprocessRunner", lambda: runner)
    args = Build().cli(["--source-dir", "Widgets", "--work-dir", str(tmp_path / "work")])

    with pytest.raises(SystemExit) as excinfo:
        Build().exec(CliContext(str(tmp_path)), args)

    assert excinfo.value.code == 1
    out = capsys.readouterr().out
    assert "ERROR: Build command failed: xcodebuild" in out
    assert "ERROR: Framework build failed. Stopping immediately." in out
    assert not (component_dir / "Widgets.framework").exists()


def test_missing_manifest_exits_with_status_1(tmp_path, capsys):
    args = Build().cli(["--source-dir", "Nowhere"])

    with pytest.raises(SystemExit) as excinfo:
        Build().exec(CliContext(str(tmp_path)), args)

    assert excinfo.value.code == 1
    assert "Component.toml not found" in capsys.readouterr().out


def test_main_dispatches_to_subcommand(tmp_path, component_dir, fake_runner, monkeypatch):
    monkeypatch.chdir(tmp_path)

    output = cli.main([
        "build",
        "--source-dir", "Widgets",
        "--work-dir", str(tmp_path / "work"),
        "--static-library",
    ])

    assert os.path.isdir(output)
    assert "libtool" in fake_runner.programs()


def test_main_without_command_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])

    assert excinfo.value.code == 1
    assert "No command specified" in capsys.readouterr().out


class VersionRunner:
    def run(self, command):
        return 0, f"{command.program} version 1.0\nextra\n"


def test_toolchain_checker_reports_found_tools(monkeypatch, capsys):
    monkeypatch.setattr(check.shutil, "which", lambda tool: f"/usr/bin/{tool}")
    checker = check.ToolchainChecker(verbose=True, runner=VersionRunner())

    results = checker.check_apple()

    assert results == {"xcodebuild": True, "lipo": True, "libtool": True}
    assert checker.print_summary() is True
    assert "✅ xcodebuild: Found xcodebuild version 1.0" in capsys.readouterr().out


def test_toolchain_checker_reports_missing_tools(monkeypatch, capsys):
    monkeypatch.setattr(check.shutil, "which", lambda tool: None if tool == "libtool" else tool)
    checker = check.ToolchainChecker(runner=VersionRunner())

    checker.check_apple()

    assert checker.errors == ["libtool: Not found"]
    assert checker.print_summary() is False
    assert "xcode-select --install" in capsys.readouterr().out


def test_check_command_exits_when_tools_missing(monkeypatch):
    monkeypatch.setattr(check.shutil, "which", lambda tool: None)

    with pytest.raises(SystemExit) as excinfo:
        check.Check().exec(CliContext(), check.Check().cli([]))

    assert excinfo.value.code == 1
