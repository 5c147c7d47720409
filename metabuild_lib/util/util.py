# SPDX-FileCopyrightText: 2024 metabuild contributors
#
# SPDX-License-Identifier: GPL-2.0-or-later

from __future__ import annotations

from contextlib import contextmanager
import os.path
import re
import shlex
import shutil
import subprocess
import textwrap
from typing import Iterator

from ..debug import MBLogger
from ..mb_exception import MBException
from ..mb_exception import MBRuntimeError
from ..mb_exception import ProcessExitError
from ..mb_exception import ProcessSpawnError

logger_logged_cmd = MBLogger.getLogger("logged-command")
logger_util = MBLogger.getLogger("util")


class Util:
    """
    Helper methods that may be used across the metabuild code.
    """

    @staticmethod
    def render_command(args: list[str]) -> str:
        """
        Return the command as a single string, with every argument shell-quoted.
        """
        return shlex.join(args)

    @staticmethod
    def run_command(args: list[str]) -> None:
        """
        Run an external command to completion, with the standard streams inherited from metabuild.

        Args:
            args: The command to run - args[0] is the executable, the rest its arguments.

        Raises:
            ProcessSpawnError: the executable could not be started.
            ProcessExitError: the process was killed, or exited with a non-zero code.

        Both errors carry the rendered command as context. Nothing is retried.
        """
        rendered = Util.render_command(args)
        # Passed as an argument, so brackets in the command are not taken as color markup.
        logger_logged_cmd.info("   g[%s", rendered)

        try:
            process = subprocess.run(args, check=False)
        except OSError as e:
            reason = e.strerror or str(e)
            err = ProcessSpawnError(args, f"could not spawn process: {reason}")
            logger_util.debug(textwrap.dedent("""\
                Unable to execute "%s"
                Currently PATH is set to %s"""), rendered, os.environ.get("PATH"))
            raise err.add_context(f"while running command {rendered}") from e

        returncode = process.returncode
        if returncode == 0:
            return

        if returncode < 0:
            err = ProcessExitError(args, signal=-returncode)
        else:
            err = ProcessExitError(args, exit_code=returncode)
        raise err.add_context(f"while running command {rendered}")

    @staticmethod
    @contextmanager
    def error_context(context: str) -> Iterator[None]:
        """
        Attach ``context`` to any metabuild exception raised in the enclosed block, then let it propagate.

        ::

            with Util.error_context("while building the binary"):
                Util.run_command(["make"])
        """
        try:
            yield
        except MBException as err:
            err.add_context(context)
            raise

    @staticmethod
    def p_chdir(directory: str) -> None:
        """
        Is exactly like "chdir", but it will also print out a message saying that we're switching to the directory.
        """
        logger_util.info(f"Entering directory g[{directory}]")

        try:
            os.chdir(directory)
        except OSError as e:
            raise MBRuntimeError(f"Could not change to directory {directory}: {e}")

    @staticmethod
    def safe_rmtree(path: str) -> bool:
        """
        Delete a directory and all files and subdirectories within.

        An analog to "rm -rf" from Linux.

        Args:
             path: Path to delete
        Returns:
             True on success, False for failure.
        """
        # Pretty user-visible path
        user_path = path
        home = os.environ.get("HOME")
        if home:
            user_path = re.sub(r"^" + re.escape(home), "~", user_path)

        # Error out because we probably have a logic error even though it would
        # delete just fine.
        if not os.path.isdir(path):
            logger_util.error(f"Cannot recursively remove {user_path}, as it is not a directory.")
            return False

        try:
            shutil.rmtree(path)
        except OSError as e:
            logger_util.error(f"Unable to remove directory {user_path}: {e}")
            return False
        return True

    @staticmethod
    def confirmed_to_continue(prompt: str, prefilled_answer: str | None = None) -> bool:
        """
        Ask a yes/no question on the terminal. Only an explicit "y" or "yes" counts as agreement.

        Args:
            prompt: The question, without the answer hint.
            prefilled_answer: If not None, used instead of reading from stdin.
        """
        if prefilled_answer is None:
            try:
                answer = input(f"   {prompt} [y/N]: ")
            except EOFError:
                answer = ""
        else:
            answer = prefilled_answer

        return answer.strip().lower() in ["y", "yes"]
