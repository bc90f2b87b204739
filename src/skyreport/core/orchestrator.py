"""Drive the external clone/build/serve/benchmark sequence.

A :class:`ProcessOrchestrator` belongs to exactly one run. Its steps must be
called in order::

    prepare_workspace -> build -> start_server -> run_benchmark -> stop_server -> cleanup

Calling a step out of order raises :class:`OrchestratorStateError`.
``stop_server`` and ``cleanup`` are the exception: they may run at any point
(they are the teardown path) and never raise. :func:`workspace_session`
guarantees they run on every exit path.
"""

from __future__ import annotations

import shutil
import socket
import subprocess
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from skyreport import logger
from skyreport.errors import CleanupError, OrchestratorStateError, ProcessError, WorkspaceError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from skyreport.core.config import Settings


class Stage(IntEnum):
    IDLE = 0
    CLONED = 1
    BUILT = 2
    SERVER_RUNNING = 3
    BENCHMARK_COMPLETE = 4
    SERVER_STOPPED = 5
    CLEANED_UP = 6


# -----------------------------------------------------------------------------
# Process seam
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CommandResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class Process(Protocol):
    pid: int

    def poll(self) -> int | None: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...

    def wait(self, timeout: float | None = None) -> int: ...


class CommandRunner(Protocol):
    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        timeout: float | None = None,
        capture: bool = False,
    ) -> CommandResult: ...

    def spawn(self, argv: Sequence[str], *, cwd: Path) -> Process: ...


class SubprocessRunner:
    """Run commands with :mod:`subprocess`; uncaptured streams are shared with ours."""

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        timeout: float | None = None,
        capture: bool = False,
    ) -> CommandResult:
        logger.debug("running %s (cwd=%s)", " ".join(argv), cwd)
        proc = subprocess.run(  # noqa: S603 - argv comes from settings, never a shell
            list(argv),
            cwd=cwd,
            timeout=timeout,
            capture_output=capture,
            text=True,
            check=False,
        )
        return CommandResult(proc.returncode, proc.stdout or "", proc.stderr or "")

    def spawn(self, argv: Sequence[str], *, cwd: Path) -> Process:
        logger.debug("spawning %s (cwd=%s)", " ".join(argv), cwd)
        return subprocess.Popen(list(argv), cwd=cwd)  # noqa: S603


# -----------------------------------------------------------------------------
# Benchmark parameters and server readiness
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BenchParams:
    connections: int = 50
    queries: int = 1_000_000
    payload_size: int = 4

    @classmethod
    def from_settings(cls, settings: Settings) -> BenchParams:
        return cls(
            connections=settings.connections,
            queries=settings.queries,
            payload_size=settings.payload_size,
        )

    def argv(self) -> list[str]:
        return [f"-c{self.connections}", f"-q{self.queries}", f"-s{self.payload_size}", "--json"]


def wait_for_port(
    host: str,
    port: int,
    *,
    timeout: float,
    interval: float,
    process: Process | None = None,
) -> None:
    """Poll until a TCP connection to *host*:*port* succeeds.

    Raises :class:`ProcessError` if *process* exits first or *timeout* elapses.
    """
    deadline = time.monotonic() + timeout
    attempts = 0
    while True:
        attempts += 1
        if process is not None and process.poll() is not None:
            msg = f"server exited with code {process.poll()} before accepting connections"
            raise ProcessError(msg)
        try:
            with socket.create_connection((host, port), timeout=interval):
                logger.debug("server accepted a connection after %d attempt(s)", attempts)
                return
        except OSError:
            pass
        if time.monotonic() >= deadline:
            msg = f"server did not accept connections on {host}:{port} within {timeout:g}s"
            raise ProcessError(msg)
        time.sleep(interval)


@dataclass(slots=True)
class ServerHandle:
    """A running server process, owned by the orchestrator that started it."""

    process: Process
    argv: tuple[str, ...]
    stopped: bool = False

    @property
    def pid(self) -> int:
        return self.process.pid


# -----------------------------------------------------------------------------
# Orchestrator
# -----------------------------------------------------------------------------


@dataclass(slots=True)
class ProcessOrchestrator:
    settings: Settings
    runner: CommandRunner = field(default_factory=SubprocessRunner)
    readiness: Callable[..., None] = wait_for_port
    stage: Stage = Stage.IDLE
    workspace: Path | None = None
    commit: str | None = None
    server: ServerHandle | None = None
    _owned_root: Path | None = field(default=None, init=False, repr=False)
    _owned_workspace: Path | None = field(default=None, init=False, repr=False)

    # --- helpers -------------------------------------------------------- #

    def _require(self, expected: Stage, step: str) -> None:
        if self.stage is not expected:
            msg = f"{step}() called in stage {self.stage.name}; expected {expected.name}"
            raise OrchestratorStateError(msg)

    def _require_workspace(self) -> Path:
        if self.workspace is None:
            msg = "no workspace has been prepared"
            raise OrchestratorStateError(msg)
        return self.workspace

    @property
    def release_dir(self) -> Path:
        return self._require_workspace() / self.settings.release_dir

    def _run_workspace_step(self, what: str, argv: Sequence[str], *, cwd: Path, timeout: float) -> None:
        try:
            result = self.runner.run(argv, cwd=cwd, timeout=timeout)
        except subprocess.TimeoutExpired as exc:
            msg = f"{what} timed out after {timeout:g}s"
            raise WorkspaceError(msg) from exc
        except OSError as exc:
            msg = f"{what} could not be started: {exc}"
            raise WorkspaceError(msg) from exc
        if result.returncode != 0:
            msg = f"{what} failed with exit code {result.returncode}"
            raise WorkspaceError(msg)

    # --- steps ---------------------------------------------------------- #

    def prepare_workspace(self, ref: str) -> str:
        """Clone the source repository, check out *ref* and return the resolved HEAD hash."""
        self._require(Stage.IDLE, "prepare_workspace")
        settings = self.settings

        if settings.workspace_root is None:
            root = Path(tempfile.mkdtemp(prefix="skyreport-"))
            self._owned_root = root
        else:
            root = settings.workspace_root
            root.mkdir(parents=True, exist_ok=True)
        workspace = root / settings.repo
        if workspace.exists():
            msg = f"workspace {workspace} already exists"
            raise WorkspaceError(msg)
        self._owned_workspace = workspace
        self.workspace = workspace

        logger.info("Cloning %s ...", settings.source_repo)
        self._run_workspace_step(
            "git clone",
            ["git", "clone", settings.source_repo, str(workspace)],
            cwd=root,
            timeout=settings.clone_timeout,
        )
        logger.info("Checking out `%s`", ref)
        self._run_workspace_step(
            f"git checkout {ref}",
            ["git", "checkout", ref],
            cwd=workspace,
            timeout=settings.clone_timeout,
        )

        try:
            head = self.runner.run(["git", "rev-parse", "HEAD"], cwd=workspace, capture=True)
        except OSError as exc:
            msg = f"could not resolve HEAD: {exc}"
            raise WorkspaceError(msg) from exc
        commit = head.stdout.strip().replace('"', "")
        if head.returncode != 0 or head.stderr.strip() or not commit:
            msg = f"could not resolve HEAD: {head.stderr.strip() or 'empty output'}"
            raise WorkspaceError(msg)

        self.commit = commit
        self.stage = Stage.CLONED
        logger.info("Resolved `%s` to %s", ref, commit)
        return commit

    def build(self) -> None:
        """Build the server and benchmark binaries; one attempt, no retry."""
        self._require(Stage.CLONED, "build")
        workspace = self._require_workspace()
        logger.info("Starting build ... (this may take a while)")
        self._run_workspace_step(
            "build",
            self.settings.build_command,
            cwd=workspace,
            timeout=self.settings.build_timeout,
        )
        for binary in (self.settings.server_binary, self.settings.bench_binary):
            if not (self.release_dir / binary).is_file():
                msg = f"build finished but {self.release_dir / binary} is missing"
                raise WorkspaceError(msg)
        self.stage = Stage.BUILT
        logger.info("Done building")

    def start_server(self) -> ServerHandle:
        """Start the server in the background and wait until it accepts connections."""
        self._require(Stage.BUILT, "start_server")
        settings = self.settings
        argv = (str(self.release_dir / settings.server_binary), *settings.server_args)
        logger.info("Starting server in background")
        try:
            process = self.runner.spawn(argv, cwd=self.release_dir)
        except OSError as exc:
            msg = f"could not start server: {exc}"
            raise ProcessError(msg) from exc
        self.server = ServerHandle(process=process, argv=argv)

        self.readiness(
            settings.server_host,
            settings.server_port,
            timeout=settings.ready_timeout,
            interval=settings.ready_interval,
            process=process,
        )
        self.stage = Stage.SERVER_RUNNING
        logger.info("Server is up (pid %s)", process.pid)
        return self.server

    def run_benchmark(self, params: BenchParams | None = None) -> str:
        """Run the benchmark client and return its standard output."""
        self._require(Stage.SERVER_RUNNING, "run_benchmark")
        params = params or BenchParams.from_settings(self.settings)
        argv = [str(self.release_dir / self.settings.bench_binary), *params.argv()]
        logger.info("Beginning benchmark ...")
        try:
            result = self.runner.run(
                argv,
                cwd=self.release_dir,
                timeout=self.settings.bench_timeout,
                capture=True,
            )
        except subprocess.TimeoutExpired as exc:
            msg = f"benchmark timed out after {self.settings.bench_timeout:g}s"
            raise ProcessError(msg) from exc
        except OSError as exc:
            msg = f"could not start benchmark: {exc}"
            raise ProcessError(msg) from exc

        if result.stderr:
            msg = f"benchmark failed with error: `{result.stderr.strip()}`"
            raise ProcessError(msg)
        if result.returncode != 0:
            msg = f"benchmark returned a non-zero exit code ({result.returncode})"
            raise ProcessError(msg)

        output = result.stdout.strip()
        logger.debug("JSON output from benchmark: `%s`", output)
        self.stage = Stage.BENCHMARK_COMPLETE
        return output

    def stop_server(self, handle: ServerHandle | None = None) -> None:
        """Terminate the server. Safe to call repeatedly; failures are only logged."""
        handle = handle or self.server
        if handle is None or handle.stopped:
            return
        try:
            _terminate(handle.process, timeout=self.settings.stop_timeout)
        except CleanupError as exc:
            logger.warning("%s", exc)
        handle.stopped = True
        if self.stage in (Stage.SERVER_RUNNING, Stage.BENCHMARK_COMPLETE):
            self.stage = Stage.SERVER_STOPPED
        logger.info("Server stopped")

    def cleanup(self) -> None:
        """Remove the workspace this orchestrator created. Failures are only logged."""
        if self.stage is Stage.CLEANED_UP:
            return
        target = self._owned_root or self._owned_workspace
        if target is not None and target.exists():
            logger.info("Removing the generated files ...")
            try:
                _remove_tree(target)
            except CleanupError as exc:
                logger.warning("%s", exc)
        self.stage = Stage.CLEANED_UP


def _terminate(process: Process, *, timeout: float) -> None:
    try:
        if process.poll() is not None:
            return
        process.terminate()
        try:
            process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            logger.warning("server did not exit within %gs; killing it", timeout)
            process.kill()
            process.wait(timeout=timeout)
    except (OSError, subprocess.SubprocessError) as exc:
        msg = f"failed to stop server (pid {process.pid}): {exc}"
        raise CleanupError(msg) from exc


def _remove_tree(path: Path) -> None:
    try:
        shutil.rmtree(path)
    except OSError as exc:
        msg = f"failed to remove workspace {path}: {exc}"
        raise CleanupError(msg) from exc


@contextmanager
def workspace_session(
    settings: Settings,
    *,
    runner: CommandRunner | None = None,
    readiness: Callable[..., None] | None = None,
) -> Iterator[ProcessOrchestrator]:
    """Yield a fresh orchestrator and tear it down however the block exits."""
    orchestrator = ProcessOrchestrator(
        settings,
        runner=runner or SubprocessRunner(),
        readiness=readiness or wait_for_port,
    )
    try:
        yield orchestrator
    finally:
        orchestrator.stop_server()
        orchestrator.cleanup()


@dataclass(frozen=True, slots=True)
class Measurement:
    """Resolved commit and raw benchmark output for one ref."""

    commit: str
    output: str


def measure(
    ref: str,
    settings: Settings,
    *,
    runner: CommandRunner | None = None,
    readiness: Callable[..., None] | None = None,
) -> Measurement:
    """Clone, build, serve and benchmark *ref*, always tearing down afterwards."""
    with workspace_session(settings, runner=runner, readiness=readiness) as orchestrator:
        commit = orchestrator.prepare_workspace(ref)
        orchestrator.build()
        handle = orchestrator.start_server()
        output = orchestrator.run_benchmark()
        orchestrator.stop_server(handle)
        orchestrator.cleanup()
    return Measurement(commit=commit, output=output)


__all__ = [
    "BenchParams",
    "CommandResult",
    "CommandRunner",
    "Measurement",
    "Process",
    "ProcessOrchestrator",
    "ServerHandle",
    "Stage",
    "SubprocessRunner",
    "measure",
    "wait_for_port",
    "workspace_session",
]
