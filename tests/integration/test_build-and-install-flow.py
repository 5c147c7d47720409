# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

import os

import pytest

from metabuild_lib.application import Application
from metabuild_lib.install_prefix import InstallPrefixResolver
from metabuild_lib.mb_exception import ProcessExitError
from metabuild_lib.util.util import Util


@pytest.fixture
def project(tmp_path, monkeypatch):
    """
    A Makefile project, entered from one of its subdirectories.
    """
    root = tmp_path / "project"
    (root / "src" / "lib").mkdir(parents=True)
    (root / "Makefile").write_text("all:\n")
    (tmp_path / "config").mkdir()
    (tmp_path / "home").mkdir()

    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("XDG_BIN_HOME", raising=False)
    monkeypatch.setattr(InstallPrefixResolver, "is_superuser", staticmethod(lambda: False))
    monkeypatch.chdir(root / "src" / "lib")
    return os.path.realpath(root)


@pytest.fixture
def commands(monkeypatch):
    commands = []
    monkeypatch.setattr(Util, "run_command", staticmethod(lambda args: commands.append(list(args))))
    return commands


def test_build_from_subdirectory(project, commands):
    assert Application(["-j", "2", "build"]).run() == 0
    assert commands == [["make", "-j", "2"]]
    assert os.getcwd() == project


def test_release_install_to_user_prefix(project, commands):
    assert Application(["-j", "2", "-m", "release", "install"]).run() == 0
    user_prefix = os.path.join(os.environ["HOME"], ".local")
    assert commands == [
        ["make", "-j", "2", "CFLAGS=-O3"],
        ["make", "install", f"PREFIX={user_prefix}"],
    ]


def test_declined_debug_install(project, commands, monkeypatch, caplog):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert Application(["-j", "2", "install", "--prefix", "/opt/x"]).run() == 1
    assert commands == [["make", "-j", "2"]]
    assert "canceled by user" in caplog.text


def test_assume_yes_skips_prompt(project, commands, monkeypatch):
    def no_input(prompt):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", no_input)
    assert Application(["-y", "-j", "2", "install", "--prefix", "/opt/x"]).run() == 0
    assert commands[-1] == ["make", "install", "PREFIX=/opt/x"]


def test_explicit_build_system_skips_detection(project, commands):
    assert Application(["-b", "meson", "-j", "3", "run", "hello", "world"]).run() == 0
    builddir = os.path.join(project, "src", "lib", ".build-debug")
    assert commands == [
        ["meson", "setup", "--buildtype=debug", builddir],
        ["meson", "compile", "-C", builddir, "-j", "3"],
        [os.path.join(builddir, "hello"), "world"],
    ]


def test_config_file_and_command_line(project, commands, tmp_path):
    (tmp_path / "config" / "metabuild.yaml").write_text("config-version: 1\nglobal:\n  build-mode: release\n  num-cores: 4\n")

    assert Application(["build"]).run() == 0
    assert commands[-1] == ["make", "-j", "4", "CFLAGS=-O3"]

    assert Application(["-m", "debug", "build"]).run() == 0
    assert commands[-1] == ["make", "-j", "4"]


def test_failure_reports_error_chain(project, monkeypatch, caplog):
    def failing(args):
        raise ProcessExitError(args, exit_code=2).add_context(f"while running command {Util.render_command(args)}")

    monkeypatch.setattr(Util, "run_command", staticmethod(failing))
    assert Application(["-j", "2", "run", "hello"]).run() == 1

    assert "while building the binary" in caplog.text
    assert "while running command make -j 2" in caplog.text
    assert "process exited with exit code 2" in caplog.text
    assert caplog.text.index("while building the binary") < caplog.text.index("exit code 2")


def test_no_build_system_found(tmp_path, monkeypatch, commands, caplog):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("metabuild_lib.project.Project.detect_in_dir", staticmethod(lambda path: None))

    assert Application(["build"]).run() == 1
    assert commands == []
    assert "Detection Error" in caplog.text


def test_invalid_command_line(project, commands):
    assert Application(["-j", "0", "build"]).run() == 1
    assert commands == []


def test_error_report_keeps_brackets(project, monkeypatch, caplog):
    def failing(args):
        raise ProcessExitError(args, exit_code=1).add_context(f"while running command {Util.render_command(args)}")

    monkeypatch.setattr(Util, "run_command", staticmethod(lambda args: failing(args) if args[0] == "./a[0]" else None))
    assert Application(["-j", "2", "run", "./a[0]", "b]"]).run() == 1
    assert "while running command './a[0]' 'b]'" in caplog.text
