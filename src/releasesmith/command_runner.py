"""
Utilities for executing external commands.

Commands are described structurally (program, ordered argument list,
environment) rather than as templated strings, so no quoting is ever needed
when the same command is issued on different host platforms.
"""

from __future__ import annotations

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from releasesmith.exceptions import ExternalToolError
from releasesmith.log_utils import logger

REDACTED = "***"


@dataclass(frozen=True)
class CommandSpec:
    """An external command: program, ordered arguments and extra environment."""

    program: str
    args: Tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Optional[str] = None
    secrets: Tuple[str, ...] = ()
    """Values masked whenever the command is logged."""

    def argv(self) -> List[str]:
        return [self.program, *self.args]

    def format(self) -> str:
        text = " ".join(shlex.quote(part) for part in self.argv())
        for secret in self.secrets:
            if secret:
                text = text.replace(secret, REDACTED)
        return text


@dataclass
class CommandResult:
    """Represents the outcome of an executed command."""

    command: CommandSpec
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return (self.stdout or "") + (self.stderr or "")


class CommandRunner:
    """
    Abstract command runner.

    Subclasses implement `_execute`; `run` adds logging and the failure policy.
    Every call blocks until the process exits. No timeout is applied.
    """

    def run(self, command: CommandSpec, *, check: bool = True) -> CommandResult:
        """
        Run a command and return its result.

        When `check` is true a non-zero exit logs the captured output and raises
        ExternalToolError. When false the failure is only logged at warning level
        and the caller decides what to do with the result.
        """
        logger.info(f"Running {command.format()}...")
        result = self._execute(command)
        if result.success:
            return result

        if check:
            if result.output:
                logger.error(result.output.rstrip())
            raise ExternalToolError(
                f"Command {command.format()} failed!",
                results=[result],
                details=f"exit code {result.returncode}",
            )

        logger.warning(
            f"Command {command.format()} exited with code {result.returncode}"
        )
        return result

    def _execute(self, command: CommandSpec) -> CommandResult:
        raise NotImplementedError


class SubprocessCommandRunner(CommandRunner):
    """Command runner that executes commands via :mod:`subprocess`."""

    @staticmethod
    def _merge_environment(env: Mapping[str, str]) -> Optional[Dict[str, str]]:
        if not env:
            return None
        merged = os.environ.copy()
        merged.update(env)
        return merged

    def _execute(self, command: CommandSpec) -> CommandResult:
        try:
            process = subprocess.run(
                command.argv(),
                cwd=command.cwd,
                env=self._merge_environment(command.env),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            # Missing or non-executable program; reported like a failed exit
            return CommandResult(command=command, returncode=127, stderr=str(exc))

        return CommandResult(
            command=command,
            returncode=process.returncode,
            stdout=process.stdout or "",
            stderr=process.stderr or "",
        )


class RecordingCommandRunner(CommandRunner):
    """
    Command runner that records commands instead of executing them.

    `returncodes` maps a program name to the exit code it should report
    (default 0). `on_run` is called with every command before it "completes",
    which lets callers simulate the files a tool would produce.
    """

    def __init__(
        self,
        returncodes: Optional[Mapping[str, int]] = None,
        on_run: Optional[Callable[[CommandSpec], None]] = None,
    ) -> None:
        self.commands: List[CommandSpec] = []
        self.returncodes: Dict[str, int] = dict(returncodes or {})
        self.on_run = on_run

    def _execute(self, command: CommandSpec) -> CommandResult:
        self.commands.append(command)
        if self.on_run is not None:
            self.on_run(command)
        returncode = self.returncodes.get(command.program, 0)
        stderr = "" if returncode == 0 else f"{command.program} failed"
        return CommandResult(command=command, returncode=returncode, stderr=stderr)

    def programs(self) -> List[str]:
        return [c.program for c in self.commands]

    def find(self, program: str, *args_prefix: str) -> List[CommandSpec]:
        """Return recorded commands for `program` whose arguments start with `args_prefix`."""
        prefix = tuple(args_prefix)
        return [
            c
            for c in self.commands
            if c.program == program and c.args[: len(prefix)] == prefix
        ]


def run_first_success(
    runner: CommandRunner, strategies: Sequence[CommandSpec], description: str
) -> CommandResult:
    """
    Try alternative commands in order and return the first successful result.

    Every attempt runs with `check=False`. When all of them fail, a single
    ExternalToolError carrying each attempt's result is raised.
    """
    results: List[CommandResult] = []
    for strategy in strategies:
        result = runner.run(strategy, check=False)
        if result.success:
            return result
        results.append(result)

    tried = "; ".join(r.command.format() for r in results)
    raise ExternalToolError(f"Failed to {description}", results=results, details=tried)
