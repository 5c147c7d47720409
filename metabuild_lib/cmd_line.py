# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import argparse

from .build_mode import BuildMode
from .mb_exception import ConfigError
from .project import Project


class Cmdline:
    """
    Centralizes handling of command line options.

    Global options come before the subcommand, and are named like the options of the
    configuration file, so that they can override them::

        metabuild -m release -j 8 install --prefix ~/opt

    Example:
    ::

        opts = Cmdline().read_command_line_options(sys.argv[1:])

        ctx.load_config(opts["opts"]["global"])
        ctx.set_options(opts["opts"]["global"])

        if opts["run_mode"] == "run":
            build_system.run(opts["executable"], opts["args"])
    """

    def read_command_line_options(self, options: list[str]) -> dict:
        """
        Decode the command line options passed into it and return a dictionary describing what actions to take.

        The resulting object will be shaped as follows:
        ::

            returned_dict = {
                "opts": {
                    "global": {
                        # Only the options the user actually passed
                        "opt-name": "opt-value",
                        ...
                    },
                },
                "run_mode": "build",  # or "run", "clean", "install"
                "executable": None,  # set for "run"
                "args": [],  # arguments for the executable of "run"
                "prefix": None,  # set for "install --prefix"
                "rc-file": None,
                "debug": False,
            }

        Raises:
            ConfigError: on invalid arguments.
        """
        parser = self._make_parser()
        try:
            args = parser.parse_args(options)
        except SystemExit as e:
            # --help exits with 0, usage errors with 2
            if e.code == 0:
                raise
            raise ConfigError("Invalid command line, see metabuild --help")

        found_options = {}
        if args.build_system is not None:
            found_options["build-system"] = args.build_system
        if args.build_mode is not None:
            found_options["build-mode"] = args.build_mode
        if args.jobs is not None:
            if args.jobs <= 0:
                raise ConfigError(f"Invalid job count {args.jobs}, expected a positive number")
            found_options["num-cores"] = args.jobs
        if args.yes:
            found_options["assume-yes"] = True
        if args.colorful_output is not None:
            found_options["colorful-output"] = args.colorful_output

        return {
            "opts": {"global": found_options},
            "run_mode": args.command,
            "executable": getattr(args, "executable", None),
            "args": getattr(args, "args", None) or [],
            "prefix": getattr(args, "prefix", None),
            "rc-file": args.rc_file,
            "debug": args.debug,
        }

    @staticmethod
    def _make_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(prog="metabuild", description="Build, run, clean and install Make and Meson projects with the same commands.")
        parser.add_argument("-b", "--build-system", choices=list(Project.BUILD_SYSTEM_CLASSES), help="Use this build system instead of detecting it")
        parser.add_argument("-m", "--build-mode", choices=[mode.value for mode in BuildMode], help="Build mode (default: debug)")
        parser.add_argument("-j", "--jobs", type=int, help="Number of parallel jobs (default: available CPUs)")
        parser.add_argument("-y", "--yes", action="store_true", help="Answer yes to confirmation prompts")
        parser.add_argument("--rc-file", help="Read options from this configuration file")
        parser.add_argument("--colorful-output", action=argparse.BooleanOptionalAction, default=None, help="Colorize the output")
        parser.add_argument("--debug", action="store_true", help="Show debugging output")

        subparsers = parser.add_subparsers(dest="command", required=True)

        subparsers.add_parser("build", help="Build the project")

        run_parser = subparsers.add_parser("run", help="Build the project, then run an executable")
        run_parser.add_argument("executable", help="Executable to run (relative to the build directory for Meson)")
        run_parser.add_argument("args", nargs=argparse.REMAINDER, help="Arguments passed to the executable")

        subparsers.add_parser("clean", help="Remove build outputs")

        install_parser = subparsers.add_parser("install", help="Build the project, then install it")
        install_parser.add_argument("--prefix", help="Install prefix (default: /usr/local as root, ~/.local otherwise)")

        return parser
