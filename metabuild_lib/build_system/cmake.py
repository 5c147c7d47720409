# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from typing import NoReturn

from ..mb_exception import UnsupportedBackendError
from .build_system import BuildSystem


class BuildSystemCMake(BuildSystem):
    """
    CMake projects are recognized, but not supported. Every operation fails.
    """

    @staticmethod
    # @override
    def name() -> str:
        return "cmake"

    def _unsupported(self) -> NoReturn:
        raise UnsupportedBackendError(f"the {self.name()} build system is not implemented")

    # @override
    def build_internal(self) -> None:
        self._unsupported()

    # @override
    def run_internal(self, executable: str, args: list[str]) -> None:
        self._unsupported()

    # @override
    def clean_internal(self) -> None:
        self._unsupported()

    # @override
    def install_internal(self, prefix: str) -> None:
        self._unsupported()
