# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from .build_mode import BuildMode
from .debug import MBLogger
from .mb_exception import MBRuntimeError
from .mb_exception import UserAbortError
from .util.util import Util

if TYPE_CHECKING:
    from .build_context import BuildContext

logger_prefix = MBLogger.getLogger("install-prefix")


class InstallPrefixResolver:
    """
    Decides where ``install`` puts things.

    In order of priority:
        * the prefix the user gave explicitly, used verbatim;
        * ``/usr/local`` when running as root;
        * the parent of the user's own executable directory (``~/.local`` for ``~/.local/bin``).
    """

    SYSTEM_PREFIX = "/usr/local"

    def __init__(self, ctx: BuildContext):
        self.ctx = ctx
        self.prefilled_prompt_answer = "yes" if ctx.get_option("assume-yes") else None

    @staticmethod
    def is_superuser() -> bool:
        return hasattr(os, "geteuid") and os.geteuid() == 0

    @staticmethod
    def user_executable_dir() -> str:
        """
        Return the directory where user-scoped binaries are expected to be installed.

        Follows the XDG convention: ``$XDG_BIN_HOME`` if set to an absolute path, else ``$HOME/.local/bin``.
        """
        if os.name != "posix":
            raise MBRuntimeError("Could not determine the user executable directory on this platform, use --prefix")

        xdg_bin_home = os.environ.get("XDG_BIN_HOME", "")
        if os.path.isabs(xdg_bin_home):
            return xdg_bin_home

        home = os.environ.get("HOME", "")
        if not home:
            raise MBRuntimeError("Could not determine the user executable directory: HOME is not set, use --prefix")
        return os.path.join(home, ".local", "bin")

    def resolve(self, explicit_prefix: str | None = None) -> str:
        if explicit_prefix:
            logger_prefix.debug(f"Using explicit install prefix g[{explicit_prefix}]")
            return explicit_prefix

        if self.is_superuser():
            logger_prefix.debug(f"Running as root, using system-wide install prefix g[{self.SYSTEM_PREFIX}]")
            return self.SYSTEM_PREFIX

        prefix = os.path.dirname(os.path.normpath(self.user_executable_dir()))
        logger_prefix.debug(f"Using per-user install prefix g[{prefix}]")
        return prefix

    def confirm_build_mode(self) -> None:
        """
        Ask for confirmation before installing debug binaries.

        Raises:
            UserAbortError: if the user declines.
        """
        if self.ctx.build_mode() != BuildMode.DEBUG:
            return

        logger_prefix.warning(" y[*] You are about to install a b[debug] build. The b[release] mode is recommended for installed binaries (use -m release).")
        if not Util.confirmed_to_continue("Do you want to continue?", self.prefilled_prompt_answer):
            raise UserAbortError("Installation of a debug build canceled by user")
