# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

from typing import TYPE_CHECKING

from ..debug import MBLogger
from ..install_prefix import InstallPrefixResolver
from ..mb_exception import ProgramError
from ..util.util import Util

if TYPE_CHECKING:
    from ..build_context import BuildContext

logger_buildsystem = MBLogger.getLogger("build-system")


class BuildSystem:
    """
    Base class for the various build systems.

    Implements the subcommands as a fixed sequence of steps and leaves the actual commands to
    the ``*_internal`` hooks of subclasses. ``run`` and ``install`` always build first, and
    a step only starts if every step before it succeeded.

    ::

        buildsys = project.build_system(ctx)

        buildsys.build()
        buildsys.run("hello", ["--verbose"])
        buildsys.install(prefix=None)
    """

    def __init__(self, ctx: BuildContext):
        self.ctx = ctx

    @staticmethod
    def name() -> str:
        return "generic"

    def __str__(self) -> str:
        return self.name()

    def job_options(self) -> list[str]:
        """
        Return the parallelism arguments for the build command.
        """
        return ["-j", str(self.ctx.num_cores())]

    # Subcommands

    def build(self) -> None:
        logger_buildsystem.debug(f"Building with g[{self}] in b[{self.ctx.build_mode()}] mode")
        with Util.error_context("while building the binary"):
            self.build_internal()

    def run(self, executable: str, args: list[str]) -> None:
        self.build()
        with Util.error_context("while running the binary"):
            self.run_internal(executable, args)

    def clean(self) -> None:
        with Util.error_context("while cleaning the build"):
            self.clean_internal()

    def install(self, prefix: str | None = None) -> None:
        self.build()

        resolver = InstallPrefixResolver(self.ctx)
        with Util.error_context("while resolving the install prefix"):
            install_prefix = resolver.resolve(prefix)
        resolver.confirm_build_mode()

        logger_buildsystem.info(f"Installing to g[{install_prefix}]")
        with Util.error_context("while installing the binary"):
            self.install_internal(install_prefix)

    # Hooks for subclasses

    def build_internal(self) -> None:
        raise ProgramError(f"{self.__class__.__name__} does not implement build_internal()")

    def run_internal(self, executable: str, args: list[str]) -> None:
        Util.run_command([executable, *args])

    def clean_internal(self) -> None:
        raise ProgramError(f"{self.__class__.__name__} does not implement clean_internal()")

    def install_internal(self, prefix: str) -> None:
        raise ProgramError(f"{self.__class__.__name__} does not implement install_internal()")
