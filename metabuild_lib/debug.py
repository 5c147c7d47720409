# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

import logging
import logging.config
import os
import sys

import yaml


class Debug:
    """
    Terminal color handling for use with metabuild.

    Messages passed to the loggers may contain color markup, which is replaced by :meth:`colorize`:
    ``r[`` red, ``g[`` green, ``y[`` yellow, ``b[`` bold, and ``]`` which resets to normal.
    """

    __instance = None
    __initialized = False

    def __new__(cls, *args, **kwargs):
        if cls.__instance is None:  # This ensures that we have only one instance of Debug class (Singleton)
            cls.__instance = super().__new__(cls)
        return cls.__instance

    def __init__(self):
        if not self.__initialized:
            self.__initialized = True

            # Colors
            self.RED = ""
            self.GREEN = ""
            self.YELLOW = ""
            # Other
            self.NORMAL = ""
            self.BOLD = ""

    def colorize(self, text: str) -> str:
        # Colors
        text = text.replace("r[", self.RED)
        text = text.replace("g[", self.GREEN)
        text = text.replace("y[", self.YELLOW)
        # Other
        text = text.replace("]", self.NORMAL)
        text = text.replace("b[", self.BOLD)
        return text

    def set_colorful_output(self, use_color: bool) -> None:
        # No colors unless output to a tty.
        if use_color and sys.stdout.isatty():
            self.RED = "\033[31m"  # "r["
            self.GREEN = "\033[32m"  # "g["
            self.YELLOW = "\033[33m"  # "y["
            self.NORMAL = "\033[0m"  # "]"
            self.BOLD = "\033[1m"  # "b["
        else:
            self.RED = ""
            self.GREEN = ""
            self.YELLOW = ""
            self.NORMAL = ""
            self.BOLD = ""

    @staticmethod
    def configure_logging() -> None:
        """
        Apply the logging configuration bundled with metabuild (YAML, in the logging.config.dictConfig schema).
        """
        config_path = os.path.join(os.path.dirname(os.path.realpath(__file__)), "data", "metabuild-logging.yaml")
        with open(config_path, "r") as f:
            config = yaml.safe_load(f)
        logging.config.dictConfig(config)

    @staticmethod
    def enable_debug_logging() -> None:
        """
        Lower every metabuild logger to DEBUG level.
        """
        for logger in MBLogger.all_loggers():
            logger.setLevel(logging.DEBUG)


class MBLogger(logging.Logger):
    """
    metabuild specific logger.

    Each named logger is created once and kept in a registry, so that the dictConfig applied by
    :meth:`Debug.configure_logging` reaches the same instances the modules hold.
    """

    _loggers = {}

    @classmethod
    def getLogger(cls, name):  # noqa: N802
        if name not in cls._loggers:
            # Go through the logging manager, so dictConfig finds and configures this instance.
            logging.setLoggerClass(cls)
            try:
                logger = logging.getLogger(name)
            finally:
                logging.setLoggerClass(logging.Logger)
            cls._loggers[name] = logger
        return cls._loggers[name]

    @classmethod
    def all_loggers(cls) -> list[MBLogger]:
        return list(cls._loggers.values())

    def _log_colorized(self, level: int, msg: str, *args, **kwargs) -> None:
        if self.isEnabledFor(level):
            super()._log(level, Debug().colorize(str(msg) + "]"), args, **kwargs)

    # The next few methods are used to print output at different importance
    # levels to allow for e.g. quiet switches, or verbose switches.  The levels are,
    # from least to most important:
    # debug, info, warning, and error.
    #
    # Debug.colorize() is automatically run on the input for all of those
    # functions. Also, the terminal color is automatically reset to normal as
    # well, so you don't need to manually add the "]" to reset.

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._log_colorized(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._log_colorized(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._log_colorized(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._log_colorized(logging.ERROR, msg, *args, **kwargs)
