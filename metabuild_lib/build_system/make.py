# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from ..build_mode import BuildMode
from ..util.util import Util
from .build_system import BuildSystem


class BuildSystemMake(BuildSystem):
    """
    Plain Makefile projects. Builds happen in the source tree, there is no build directory.

    Executables given to ``run`` are taken as-is, so they have to be in PATH or given as a path.
    """

    RELEASE_FLAGS = ["CFLAGS=-O3"]

    @staticmethod
    # @override
    def name() -> str:
        return "make"

    # @override
    def build_internal(self) -> None:
        args = ["make", *self.job_options()]
        if self.ctx.build_mode() == BuildMode.RELEASE:
            args.extend(self.RELEASE_FLAGS)
        Util.run_command(args)

    # @override
    def clean_internal(self) -> None:
        Util.run_command(["make", "clean"])

    # @override
    def install_internal(self, prefix: str) -> None:
        Util.run_command(["make", "install", f"PREFIX={prefix}"])
