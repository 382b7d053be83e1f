"""Audit sink implementations."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path

from campaignmap.contracts.audit import AuditEntry, AuditSink
from campaignmap.contracts.config import AuditMode
from campaignmap.contracts.exceptions import AuditError

_LOG = logging.getLogger("campaignmap.audit")


@dataclass
class CompletedProcess:
    """Result of a ``git`` invocation."""

    returncode: int
    stdout: str
    stderr: str


class GitAuditSink(AuditSink):
    """Commits the marker document after each mutation.

    The repository at *repo_dir* must already exist and have ``user.name`` and
    ``user.email`` configured. Commands are executed with an argument vector,
    so the description is never interpreted by a shell.
    """

    def __init__(self, repo_dir: str | Path, data_file: str | Path) -> None:
        self._repo_dir = Path(repo_dir)
        self._data_file = Path(data_file)

    async def record(self, entry: AuditEntry) -> None:
        await self._git(["add", str(self._data_file)])
        await self._git(["commit", "--allow-empty", "-m", entry.description])

    async def _git(self, args: list[str]) -> CompletedProcess:
        cmd = ["git", *args]
        _LOG.debug("Running: %s", " ".join(cmd))
        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                cwd=self._repo_dir,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise AuditError(f"could not run git: {exc}") from exc
        stdout_bytes, stderr_bytes = await proc.communicate()
        result = CompletedProcess(
            returncode=proc.returncode or 0,
            stdout=stdout_bytes.decode() if stdout_bytes else "",
            stderr=stderr_bytes.decode() if stderr_bytes else "",
        )
        if result.returncode != 0:
            raise AuditError(f"git command failed: {' '.join(cmd)}\n{result.stderr}")
        return result


class LoggingAuditSink(AuditSink):
    async def record(self, entry: AuditEntry) -> None:
        _LOG.info("%s", entry.description)


class NullAuditSink(AuditSink):
    async def record(self, entry: AuditEntry) -> None:
        return None


def create_audit_sink(mode: AuditMode | str, *, data_path: Path) -> AuditSink:
    mode = AuditMode(mode)
    if mode == AuditMode.GIT:
        data_path = data_path.resolve()
        return GitAuditSink(repo_dir=data_path.parent, data_file=data_path.name)
    if mode == AuditMode.LOG:
        return LoggingAuditSink()
    return NullAuditSink()
