# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

import pytest

from metabuild_lib.build_context import BuildContext
from metabuild_lib.install_prefix import InstallPrefixResolver
from metabuild_lib.mb_exception import MBRuntimeError
from metabuild_lib.mb_exception import UserAbortError


@pytest.fixture
def user_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.delenv("XDG_BIN_HOME", raising=False)
    monkeypatch.setattr(InstallPrefixResolver, "is_superuser", staticmethod(lambda: False))
    return tmp_path / "home"


def test_explicit_prefix_always_wins(user_env, monkeypatch):
    resolver = InstallPrefixResolver(BuildContext())
    assert resolver.resolve("/opt/thing") == "/opt/thing"

    monkeypatch.setattr(InstallPrefixResolver, "is_superuser", staticmethod(lambda: True))
    assert resolver.resolve("/opt/thing") == "/opt/thing", "explicit prefix used even as root"


def test_superuser_uses_system_prefix(user_env, monkeypatch):
    monkeypatch.setattr(InstallPrefixResolver, "is_superuser", staticmethod(lambda: True))
    assert InstallPrefixResolver(BuildContext()).resolve() == "/usr/local"


def test_user_prefix_is_parent_of_executable_dir(user_env):
    assert InstallPrefixResolver(BuildContext()).resolve() == str(user_env / ".local")


def test_user_prefix_honors_xdg_bin_home(user_env, monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_BIN_HOME", str(tmp_path / "tools" / "bin") + "/")
    assert InstallPrefixResolver(BuildContext()).resolve() == str(tmp_path / "tools")

    monkeypatch.setenv("XDG_BIN_HOME", "relative/bin")
    assert InstallPrefixResolver(BuildContext()).resolve() == str(user_env / ".local"), "relative XDG_BIN_HOME is ignored"


def test_unknown_user_dir_is_fatal(user_env, monkeypatch):
    monkeypatch.delenv("HOME")
    with pytest.raises(MBRuntimeError):
        InstallPrefixResolver(BuildContext()).resolve()


def test_debug_install_declined(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    with pytest.raises(UserAbortError):
        InstallPrefixResolver(BuildContext()).confirm_build_mode()


def test_debug_install_accepted(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda prompt: "y")
    InstallPrefixResolver(BuildContext()).confirm_build_mode()


def test_assume_yes_skips_prompt(monkeypatch):
    def no_input(prompt):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", no_input)
    ctx = BuildContext()
    ctx.set_option("assume-yes", True)
    InstallPrefixResolver(ctx).confirm_build_mode()


def test_release_install_does_not_prompt(monkeypatch):
    def no_input(prompt):
        raise AssertionError("should not prompt")

    monkeypatch.setattr("builtins.input", no_input)
    ctx = BuildContext()
    ctx.set_option("build-mode", "release")
    InstallPrefixResolver(ctx).confirm_build_mode()
