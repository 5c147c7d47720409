# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations


class MBException(Exception):  # noqa: N818
    """
    A class to wrap "exception" messages for the script, allowing them to be dispatch based on type and automatically stringified.

    Higher-level steps attach what they were doing with :meth:`add_context`, so an error that
    happened deep inside a command run is reported as a chain, from the outermost intent down to
    the root cause::

        while building the binary
          caused by: while running command make -j 4
          caused by: process exited with exit code 2
    """

    def __init__(self, exception_type: str, msg: str):
        super().__init__(msg)
        self.exception_type = exception_type
        self.message = msg
        self.contexts: list[str] = []  # innermost first

    def __str__(self) -> str:
        return self.exception_type + " Error: " + self.message

    def add_context(self, context: str) -> MBException:
        """
        Record an enclosing intent. Later calls describe outer steps.
        """
        self.contexts.append(context)
        return self

    def message_chain(self) -> list[str]:
        """
        Return the messages of this error, outermost context first and the root cause last.
        """
        return [*reversed(self.contexts), self.message]


class MBRuntimeError(MBException):
    """
    Use for "runtime errors" (i.e. unrecoverable runtime problems that don't indicate a bug in the program itself).
    """

    def __init__(self, msg: str):
        super().__init__("Runtime", msg)


class ConfigError(MBException):
    """
    Use for "config errors", either from the command line or from the configuration file.
    """

    def __init__(self, msg: str):
        super().__init__("Config", msg)


class ProgramError(MBException):
    """
    Use for "logic errors" (i.e. impossibilities in program state, things that shouldn't be possible no matter what input is fed at runtime).

    As this type of exception indicate bug in metabuild itself, we will print the traceback in the end of the script.
    """

    def __init__(self, msg: str):
        super().__init__("Internal", msg)


class DetectionError(MBException):
    """
    Raised when no build system marker file could be found, or the file system could not be inspected.
    """

    def __init__(self, msg: str):
        super().__init__("Detection", msg)


class ProcessError(MBException):
    """
    Base for failures of an external command.
    """

    def __init__(self, command: list[str], msg: str):
        super().__init__("Process", msg)
        self.command = command


class ProcessSpawnError(ProcessError):
    """
    The executable could not be started at all (missing, or not executable).
    """


class ProcessExitError(ProcessError):
    """
    The process ran, but did not exit successfully.

    Exactly one of ``exit_code`` and ``signal`` is set.
    """

    def __init__(self, command: list[str], exit_code: int | None = None, signal: int | None = None):
        if exit_code is None:
            msg = "process was killed"
        else:
            msg = f"process exited with exit code {exit_code}"
        super().__init__(command, msg)
        self.exit_code = exit_code
        self.signal = signal


class UnsupportedBackendError(MBException):
    """
    Raised for build systems that are recognized but have no implementation.
    """

    def __init__(self, msg: str):
        super().__init__("NotImplemented", msg)


class UserAbortError(MBException):
    """
    The user declined to continue at a confirmation prompt.

    This is not a system failure, so no step context is ever attached to it.
    """

    def __init__(self, msg: str):
        super().__init__("Abort", msg)

    def add_context(self, context: str) -> MBException:
        return self
