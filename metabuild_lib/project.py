# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import os.path
from typing import TYPE_CHECKING

from .build_system.build_system import BuildSystem
from .build_system.cmake import BuildSystemCMake
from .build_system.make import BuildSystemMake
from .build_system.meson import BuildSystemMeson
from .debug import MBLogger
from .mb_exception import ConfigError
from .mb_exception import DetectionError

if TYPE_CHECKING:
    from .build_context import BuildContext

logger_project = MBLogger.getLogger("project")


class Project:
    """
    A project tree governed by exactly one build system.

    The project is either found by walking up from a directory (:meth:`detect`), or named
    explicitly by the user, in which case the given directory is taken as the root.

    ::

        project = Project.detect(os.getcwd())
        ctx.enter_project_root(project.root)
        build_system = project.build_system(ctx)
    """

    # Checked in this order within each directory; the first marker found decides.
    MARKER_FILES = [
        ("cmake", ["CMakeLists.txt"]),
        ("make", ["Makefile", "makefile"]),
        ("meson", ["meson.build"]),
    ]

    BUILD_SYSTEM_CLASSES = {
        "make": BuildSystemMake,
        "cmake": BuildSystemCMake,
        "meson": BuildSystemMeson,
    }

    def __init__(self, root: str, build_system_name: str):
        self.root = root
        self.build_system_name = build_system_name

    @staticmethod
    def detect_in_dir(path: str) -> str | None:
        """
        Return the name of the build system whose marker file is in ``path``, or None.

        Raises:
            OSError: if the directory could not be inspected.
        """
        for name, markers in Project.MARKER_FILES:
            for marker in markers:
                # os.stat raises on permission problems, unlike os.path.exists which hides them.
                try:
                    os.stat(os.path.join(path, marker))
                except (FileNotFoundError, NotADirectoryError):
                    continue
                return name
        return None

    @staticmethod
    def detect(start_dir: str) -> Project:
        """
        Find the nearest directory, starting at ``start_dir`` and going up to the file system root, that contains a build system marker file.

        Ascending stops at the first directory with any marker, even if an outer directory
        has a marker of a higher precedence.

        Raises:
            DetectionError
        """
        path = os.path.abspath(start_dir)
        while True:
            try:
                name = Project.detect_in_dir(path)
            except OSError as e:
                raise DetectionError(f"Could not inspect directory {path}: {e}").add_context("while detecting the build system") from e

            if name:
                logger_project.debug(f"Found g[{name}] project in g[{path}]")
                return Project(path, name)

            parent = os.path.dirname(path)
            if parent == path:
                break
            path = parent

        raise DetectionError(f"Could not detect the build system: no CMakeLists.txt, Makefile or meson.build found in {os.path.abspath(start_dir)} or any parent directory")

    @staticmethod
    def from_name(root: str, name: str) -> Project:
        """
        Return a project at ``root`` using the explicitly chosen build system ``name``.
        """
        name = name.strip().lower()
        if name not in Project.BUILD_SYSTEM_CLASSES:
            raise ConfigError(f"Invalid build system {name} requested, expected one of: " + ", ".join(Project.BUILD_SYSTEM_CLASSES))
        return Project(os.path.abspath(root), name)

    def build_system(self, ctx: BuildContext) -> BuildSystem:
        """
        Return a new build system object for this project.
        """
        return self.BUILD_SYSTEM_CLASSES[self.build_system_name](ctx)
