# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

from enum import Enum
import os.path

from .mb_exception import ConfigError


class BuildMode(Enum):
    """
    The build mode, affecting optimization flags and the build directory in use.
    """

    DEBUG = "debug"
    RELEASE = "release"

    @staticmethod
    def from_name(name: str) -> BuildMode:
        try:
            return BuildMode(name.strip().lower())
        except ValueError:
            raise ConfigError(f"Invalid build mode \"{name}\", expected one of: " + ", ".join(mode.value for mode in BuildMode))

    def __str__(self) -> str:
        return self.value


def build_dir_name(mode: BuildMode) -> str:
    """
    Return the name of the hidden directory holding incremental build state for ``mode``.

    Each mode has its own directory, so switching modes never reuses a setup done for the other one.
    """
    return f".build-{mode.value}"


def build_directory(project_root: str, mode: BuildMode) -> str:
    """
    Return the absolute build directory of the project at ``project_root`` for ``mode``.
    """
    return os.path.join(os.path.abspath(project_root), build_dir_name(mode))
