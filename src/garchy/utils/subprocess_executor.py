"""Subprocess execution utilities with automatic logging."""

import subprocess
import sys
from pathlib import Path
from typing import TextIO

from garchy.logger import get_logger

logger = get_logger(__name__)


class SubprocessExecutor:
    """Executes subprocess commands with automatic debug logging."""

    @staticmethod
    def run_sync(
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        check: bool = False,
        merge_stderr: bool = False,
    ) -> subprocess.CompletedProcess[str]:
        """
        Execute a synchronous subprocess command with automatic debug logging.

        No timeout is applied; a hung package manager hangs the run.

        Args:
            *args: Command arguments
            cwd: Working directory
            env: Environment variables
            check: Whether to raise exception on non-zero exit code
            merge_stderr: Redirect stderr into stdout

        Returns:
            subprocess.CompletedProcess object with text output

        Raises:
            subprocess.CalledProcessError: If check=True and returncode != 0
            FileNotFoundError: If the executable does not exist
        """
        cmd_str = " ".join(args)
        logger.debug(f"Executing sync subprocess: {cmd_str}")
        if cwd:
            logger.debug(f"Working directory: {cwd}")

        cwd_arg = str(cwd) if cwd else None

        try:
            result = subprocess.run(
                args,
                check=check,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT if merge_stderr else subprocess.PIPE,
                text=True,
                errors="replace",
                cwd=cwd_arg,
                env=env,
            )

            if result.stdout:
                logger.debug(f"Subprocess stdout: {result.stdout}")
            if result.stderr:
                logger.debug(f"Subprocess stderr: {result.stderr}")

            return result

        except Exception as e:
            logger.error(f"Subprocess execution failed: {cmd_str} - {e}")
            raise

    @staticmethod
    def run_with_realtime_output(
        *args: str,
        cwd: Path | str | None = None,
        env: dict[str, str] | None = None,
        echo: TextIO | None = None,
    ) -> tuple[int, str]:
        """
        Execute a subprocess, echoing merged stdout/stderr live while capturing it.

        stdin is inherited so that sudo and makepkg can still prompt the operator.

        Args:
            *args: Command arguments
            cwd: Working directory
            env: Environment variables
            echo: Stream to mirror output to (defaults to sys.stdout)

        Returns:
            Tuple of (returncode, combined output)
        """
        cmd_str = " ".join(args)
        logger.debug(f"Executing subprocess with streaming: {cmd_str}")
        if cwd:
            logger.debug(f"Working directory: {cwd}")

        stream = echo if echo is not None else sys.stdout
        output_lines: list[str] = []

        try:
            process = subprocess.Popen(
                args,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                cwd=str(cwd) if cwd else None,
                env=env,
            )
        except FileNotFoundError as e:
            logger.error(f"Subprocess execution failed: {cmd_str} - {e}")
            return 127, f"Command not found: {args[0]}"

        assert process.stdout is not None
        with process.stdout:
            for raw in process.stdout:
                stream.write(raw)
                stream.flush()
                line = raw.rstrip("\n\r")
                output_lines.append(line)

        returncode = process.wait()
        if returncode != 0:
            logger.debug(f"Subprocess exited with code {returncode}: {cmd_str}")
        return returncode, "\n".join(output_lines)
