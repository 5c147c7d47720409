# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

import os.path

from ..debug import MBLogger
from ..util.util import Util
from .build_system import BuildSystem

logger_buildsystem = MBLogger.getLogger("build-system")


class BuildSystemMeson(BuildSystem):
    """
    Build system used to support configuring with Meson (https://mesonbuild.com).

    Meson builds out of tree. The build directory is set up once (``meson setup``) and then
    reused by every later ``meson compile``. There is one build directory per build mode,
    see :func:`build_mode.build_directory`.

    A build directory only exists if its setup succeeded: when ``meson setup`` fails, a
    directory it created is removed again, so the next run starts from a clean setup.
    """

    @staticmethod
    # @override
    def name() -> str:
        return "meson"

    def needs_setup(self) -> bool:
        return not os.path.exists(self.ctx.build_dir())

    def setup(self) -> None:
        """
        Run ``meson setup`` into the build directory, removing it again if the setup fails.
        """
        builddir = self.ctx.build_dir()
        existed_before = os.path.exists(builddir)

        try:
            Util.run_command(["meson", "setup", f"--buildtype={self.ctx.build_mode()}", builddir])
        except BaseException:
            # Any failure, Ctrl-C included, must not leave a partial build directory.
            if not existed_before and os.path.exists(builddir):
                logger_buildsystem.warning(" y[*] Setup failed, removing partially created build directory y[%s", builddir)
                if not Util.safe_rmtree(builddir):
                    logger_buildsystem.error(" r[*] Remove r[%s] by hand before running metabuild again", builddir)
            raise

    # @override
    def build_internal(self) -> None:
        if self.needs_setup():
            with Util.error_context("while setting up the build directory"):
                self.setup()

        Util.run_command(["meson", "compile", "-C", self.ctx.build_dir(), *self.job_options()])

    # @override
    def run_internal(self, executable: str, args: list[str]) -> None:
        Util.run_command([os.path.join(self.ctx.build_dir(), executable), *args])

    # @override
    def clean_internal(self) -> None:
        builddir = self.ctx.build_dir()
        if not os.path.exists(builddir):
            logger_buildsystem.info(f"Build directory g[{builddir}] does not exist, nothing to clean")
            return
        Util.run_command(["meson", "compile", "-C", builddir, "--clean"])

    # @override
    def install_internal(self, prefix: str) -> None:
        builddir = self.ctx.build_dir()
        Util.run_command(["meson", "configure", f"-Dprefix={prefix}", builddir])
        Util.run_command(["meson", "install", "-C", builddir])
