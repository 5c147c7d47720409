# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

import os

import pytest

from metabuild_lib.mb_exception import MBRuntimeError
from metabuild_lib.mb_exception import UserAbortError
from metabuild_lib.util.util import Util


def test_contexts_are_chained_outermost_first():
    with pytest.raises(MBRuntimeError) as excinfo:
        with Util.error_context("while installing the binary"):
            with Util.error_context("while running command make install"):
                raise MBRuntimeError("process exited with exit code 2")

    assert excinfo.value.message_chain() == [
        "while installing the binary",
        "while running command make install",
        "process exited with exit code 2",
    ]
    assert str(excinfo.value) == "Runtime Error: process exited with exit code 2"


def test_user_abort_gets_no_context():
    with pytest.raises(UserAbortError) as excinfo:
        with Util.error_context("while installing the binary"):
            raise UserAbortError("canceled")
    assert excinfo.value.message_chain() == ["canceled"]


def test_other_exceptions_pass_untouched():
    with pytest.raises(KeyError):
        with Util.error_context("while building the binary"):
            raise KeyError("x")


def test_confirmed_to_continue(monkeypatch):
    assert Util.confirmed_to_continue("Continue?", "y")
    assert Util.confirmed_to_continue("Continue?", " YES ")
    assert not Util.confirmed_to_continue("Continue?", "")
    assert not Util.confirmed_to_continue("Continue?", "n")

    def eof_input(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", eof_input)
    assert not Util.confirmed_to_continue("Continue?"), "closed stdin declines"


def test_safe_rmtree(tmp_path):
    target = tmp_path / "tree"
    (target / "sub").mkdir(parents=True)
    (target / "sub" / "file").write_text("x")

    assert Util.safe_rmtree(str(target))
    assert not os.path.exists(target)
    assert not Util.safe_rmtree(str(target)), "missing directory is refused"


def test_p_chdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sub").mkdir()

    Util.p_chdir(str(tmp_path / "sub"))
    assert os.path.realpath(os.getcwd()) == os.path.realpath(tmp_path / "sub")

    with pytest.raises(MBRuntimeError):
        Util.p_chdir(str(tmp_path / "missing"))
