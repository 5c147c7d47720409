# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import os

import yaml

from .build_mode import BuildMode
from .build_mode import build_directory
from .debug import MBLogger
from .mb_exception import ConfigError
from .util.util import Util

logger_buildcontext = MBLogger.getLogger("build-context")


class BuildContext:
    """
    Contains the information needed about the invocation: the options in effect, the configuration file they came from, and the project root.

    Options are layered. Built-in defaults are overridden by the configuration file, which is
    overridden by the command line.

    Examples:
    ::

         ctx = BuildContext()
         ctx.load_config(cmdline_options)
         ctx.set_options(cmdline_options)

         ctx.enter_project_root("/path/to/project")
         builddir = ctx.build_dir()
    """

    CONFIG_VERSION = 1

    def __init__(self):
        self.options = {
            "build-system": "",  # empty means auto-detect
            "build-mode": "debug",
            "num-cores": "",  # empty means available parallelism
            "install-prefix": "",
            "colorful-output": True,
            "assume-yes": False,
        }
        self.rc_file: str | None = None
        self.project_root = os.getcwd()

    @staticmethod
    def xdg_config_home() -> str:
        # According to XDG spec, if XDG_CONFIG_HOME is not set, then we should
        # default to ~/.config
        return os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")

    def get_option(self, key: str):
        return self.options[key]

    def set_option(self, key: str, value) -> None:
        if key not in self.options:
            raise ConfigError(f"Unknown option \"{key}\"")
        self.options[key] = value

    def set_options(self, options: dict) -> None:
        for key, value in options.items():
            self.set_option(key, value)

    def build_mode(self) -> BuildMode:
        return BuildMode.from_name(str(self.get_option("build-mode")))

    def num_cores(self) -> int:
        """
        Return the job count to pass to the build tool.

        If the user did not set one, this is the number of CPUs the process may run on.
        """
        cores = self.get_option("num-cores")
        if cores == "" or cores is None:
            return BuildContext.available_parallelism()

        try:
            cores = int(cores)
        except ValueError:
            raise ConfigError(f"Invalid num-cores value \"{cores}\", expected a positive number")
        if cores <= 0:
            raise ConfigError(f"Invalid num-cores value \"{cores}\", expected a positive number")
        return cores

    @staticmethod
    def available_parallelism() -> int:
        if hasattr(os, "sched_getaffinity"):
            return max(len(os.sched_getaffinity(0)), 1)
        return os.cpu_count() or 1

    def build_dir(self) -> str:
        return build_directory(self.project_root, self.build_mode())

    def enter_project_root(self, root: str) -> None:
        """
        Make ``root`` the project root, and the current working directory of the process.
        """
        Util.p_chdir(root)
        self.project_root = root

    def detect_config_file(self) -> str | None:
        """
        Return the configuration file to use, or None if there is none.

        An explicitly set rc_file must exist. Otherwise, the first existing of
        ``./metabuild.yaml`` and ``$XDG_CONFIG_HOME/metabuild.yaml`` is used.
        """
        if self.rc_file:
            if not os.path.isfile(self.rc_file):
                raise ConfigError(f"Unable to open config file {self.rc_file}")
            return self.rc_file

        rcfiles = [os.path.join(os.getcwd(), "metabuild.yaml"),
                   os.path.join(self.xdg_config_home(), "metabuild.yaml")]
        for rcfile in rcfiles:
            if os.path.isfile(rcfile):
                return rcfile
        return None

    def read_config_file(self, config_path: str) -> dict:
        """
        Read the global options from the configuration file.

        Raises:
            ConfigError
        """
        with open(config_path, "r") as f:
            try:
                config_content = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                exc_msgs = "\n  " + "\n  ".join(str(x) for x in exc.args)
                raise ConfigError("Error parsing yaml configuration file:" + exc_msgs)

        if not isinstance(config_content, dict) or not config_content:
            raise ConfigError(f"Invalid configuration file: {config_path}")

        nodes = iter(config_content.items())
        first_node, first_node_content = next(nodes)
        if first_node != "config-version":
            # First key in the metabuild.yaml should be "config-version".
            logger_buildcontext.error(f"Invalid configuration file: {config_path}\nThe very first element in config should be \"config-version\".")
            raise ConfigError("Unexpected first key instead of \"config-version\".")
        elif first_node_content != BuildContext.CONFIG_VERSION:
            raise ConfigError(f"Unrecognized config version number. The version {BuildContext.CONFIG_VERSION} was expected, but {first_node_content} was given.")

        global_node = next(nodes, None)
        if global_node is None or global_node[0] != "global":
            logger_buildcontext.error(f"Invalid configuration file: {config_path}.")
            logger_buildcontext.error("Expecting global settings node!")
            raise ConfigError("Missing global section")

        global_opts = global_node[1] or {}
        if not isinstance(global_opts, dict):
            raise ConfigError("The global section must be a mapping of option names to values")

        unknown = [key for key in global_opts if key not in self.options]
        if unknown:
            raise ConfigError("Unknown option(s) in the global section: " + ", ".join(unknown))

        if global_opts.get("install-prefix"):
            global_opts["install-prefix"] = os.path.expanduser(str(global_opts["install-prefix"]))
        return global_opts

    def load_config(self, cmdline_options: dict) -> None:
        """
        Apply options from the configuration file, except those the user passed in the command line.
        """
        config_path = self.detect_config_file()
        if not config_path:
            logger_buildcontext.debug("No configuration file found, using defaults")
            return

        logger_buildcontext.debug(f"Using configuration file g[{config_path}]")
        self.rc_file = config_path
        global_opts = self.read_config_file(config_path)
        for key in cmdline_options:
            global_opts.pop(key, None)
        self.set_options(global_opts)
