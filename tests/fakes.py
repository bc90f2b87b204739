"""Test doubles for the process runner and the publishing collaborators."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from skyreport.core.orchestrator import CommandResult

HEAD = "0123456789abcdef0123456789abcdef01234567"


def bench_json(get: float, set_: float, update: float) -> str:
    return json.dumps(
        [
            {"name": "GET", "stat": get},
            {"name": "SET", "stat": set_},
            {"name": "UPDATE", "stat": update},
        ]
    )


class FakeProcess:
    """Stand-in for a spawned server."""

    def __init__(self, pid: int = 4242) -> None:
        self.pid = pid
        self.returncode: int | None = None
        self.terminated = False
        self.killed = False

    def poll(self) -> int | None:
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self.returncode = -15

    def kill(self) -> None:
        self.killed = True
        self.returncode = -9

    def wait(self, timeout: float | None = None) -> int:  # noqa: ARG002
        return self.returncode or 0


class FakeRunner:
    """Answers the commands the pipeline issues without touching git or cargo."""

    def __init__(
        self,
        *,
        bench_stdout: str | None = None,
        bench_stderr: str = "",
        bench_code: int = 0,
        clone_code: int = 0,
        build_code: int = 0,
        build_artifacts: bool = True,
        head: str = HEAD,
        git_codes: dict[str, int] | None = None,
        spawn_error: OSError | None = None,
        run_errors: dict[str, BaseException] | None = None,
    ) -> None:
        self.bench_stdout = bench_stdout if bench_stdout is not None else bench_json(110.0, 90.0, 100.0)
        self.bench_stderr = bench_stderr
        self.bench_code = bench_code
        self.clone_code = clone_code
        self.build_code = build_code
        self.build_artifacts = build_artifacts
        self.head = head
        self.git_codes = git_codes or {}
        self.spawn_error = spawn_error
        self.run_errors = run_errors or {}
        self.calls: list[tuple[tuple[str, ...], Path]] = []
        self.spawned: list[FakeProcess] = []
        self.workspaces: list[Path] = []

    def argvs(self) -> list[tuple[str, ...]]:
        return [argv for argv, _cwd in self.calls]

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Path,
        timeout: float | None = None,  # noqa: ARG002
        capture: bool = False,  # noqa: ARG002
    ) -> CommandResult:
        argv = tuple(argv)
        self.calls.append((argv, cwd))
        program = Path(argv[0]).name
        key = argv[1] if program == "git" else program
        if key in self.run_errors:
            raise self.run_errors[key]

        if program == "git" and argv[1] == "clone":
            target = Path(argv[-1])
            if self.clone_code == 0:
                target.mkdir(parents=True)
                self.workspaces.append(target)
            return CommandResult(self.clone_code)
        if program == "git" and argv[1] == "checkout":
            return CommandResult(0)
        if program == "git" and argv[1] == "rev-parse":
            return CommandResult(0, f"{self.head}\n", "")
        if program == "git":
            code = self.git_codes.get(argv[1], 0)
            return CommandResult(code, "", "" if code == 0 else f"{argv[1]} rejected")
        if program == "cargo":
            if self.build_code == 0 and self.build_artifacts:
                release = cwd / "target" / "release"
                release.mkdir(parents=True, exist_ok=True)
                (release / "skyd").write_text("")
                (release / "sky-bench").write_text("")
            return CommandResult(self.build_code)
        if program == "sky-bench":
            return CommandResult(self.bench_code, self.bench_stdout, self.bench_stderr)
        msg = f"unexpected command: {argv}"
        raise AssertionError(msg)

    def spawn(self, argv: Sequence[str], *, cwd: Path) -> FakeProcess:
        self.calls.append((tuple(argv), cwd))
        if self.spawn_error is not None:
            raise self.spawn_error
        process = FakeProcess()
        self.spawned.append(process)
        return process


class RecordingVCS:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.commits: list[list[str]] = []

    def commit_and_push(self, messages: Sequence[str]) -> None:
        if self.error is not None:
            raise self.error
        self.commits.append(list(messages))


class RecordingReview:
    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.comments: list[tuple[int, str]] = []

    def comment(self, pull_request: int, body: str) -> str | None:
        if self.error is not None:
            raise self.error
        self.comments.append((pull_request, body))
        return None


def no_wait(*_args: Any, **_kwargs: Any) -> None:
    return None

