# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import os
import sys
import traceback
from typing import NoReturn

import setproctitle

from .build_context import BuildContext
from .build_system.build_system import BuildSystem
from .cmd_line import Cmdline
from .debug import Debug
from .debug import MBLogger
from .mb_exception import MBException
from .mb_exception import ProgramError
from .mb_exception import UserAbortError
from .project import Project

logger_app = MBLogger.getLogger("application")


class Application:
    """
    Contains the application-layer logic (e.g. reading options, finding the project, and running the subcommand).

    The actual work is delegated to :class:`Project` (which build system governs the tree) and
    to the :class:`BuildSystem` subclasses (which commands to run for it).

    Examples:
    ::

        app = Application(sys.argv[1:])
        exitcode = app.run()
        sys.exit(exitcode)
    """

    def __init__(self, options: list[str]):
        self.context = BuildContext()
        self.options = options

    def run(self) -> int:
        """
        Run the subcommand given on the command line, and report any error to the user.

        Returns:
            The exit code for the process: 0 on success, non-zero otherwise.
        """
        try:
            self._run()
        except UserAbortError as err:
            logger_app.warning(" y[*] %s", err.message)
            return 1
        except MBException as err:
            self._report_error(err)
            return 1
        except KeyboardInterrupt:
            logger_app.error("\n r[b[*] Interrupted by user")
            return 130
        return 0

    def _run(self) -> None:
        ctx = self.context
        cmdline = Cmdline().read_command_line_options(self.options)
        cmdline_global_options = cmdline["opts"]["global"]

        if cmdline["debug"]:
            Debug.enable_debug_logging()

        ctx.rc_file = cmdline["rc-file"]
        ctx.load_config(cmdline_global_options)
        ctx.set_options(cmdline_global_options)  # command line overrides config
        Debug().set_colorful_output(bool(ctx.get_option("colorful-output")))

        run_mode = cmdline["run_mode"]
        setproctitle.setproctitle(f"metabuild {run_mode}")

        project = self.find_project()
        ctx.enter_project_root(project.root)
        build_system = project.build_system(ctx)
        logger_app.debug(f"Using b[{build_system}] build system, b[{ctx.build_mode()}] mode, b[{ctx.num_cores()}] jobs")

        self.run_subcommand(build_system, cmdline)

    def find_project(self) -> Project:
        """
        Return the project to work on, either named explicitly by the user or detected from the current directory.
        """
        explicit = self.context.get_option("build-system")
        if explicit:
            # An explicit choice always wins, no detection is done.
            return Project.from_name(os.getcwd(), explicit)
        return Project.detect(os.getcwd())

    @staticmethod
    def run_subcommand(build_system: BuildSystem, cmdline: dict) -> None:
        run_mode = cmdline["run_mode"]

        if run_mode == "build":
            build_system.build()
        elif run_mode == "run":
            build_system.run(cmdline["executable"], cmdline["args"])
        elif run_mode == "clean":
            build_system.clean()
        elif run_mode == "install":
            build_system.install(cmdline["prefix"] or build_system.ctx.get_option("install-prefix") or None)
        else:
            raise ProgramError(f"Unknown subcommand {run_mode}")

    @staticmethod
    def _report_error(err: MBException) -> None:
        """
        Print the error as a chain, from the outermost step down to the root cause.
        """
        chain = err.message_chain()
        # Messages may quote commands and paths, keep them out of the color markup.
        logger_app.error(" r[b[*] %s Error: r[%s", err.exception_type, chain[0])
        for msg in chain[1:]:
            logger_app.error("     caused by: %s", msg)

        if isinstance(err, ProgramError):
            logger_app.error("\nThis is a bug in metabuild, please report it along with this traceback:")
            traceback.print_exception(err)


def main() -> NoReturn:
    Debug.configure_logging()
    app = Application(sys.argv[1:])
    sys.exit(app.run())
