"""
Stack runtime backed by the Pulumi CLI.

Every stack gets its own project directory under the work dir holding a
YAML-runtime ``Pulumi.yaml`` rendered from the layer's program. Commands
run as asyncio subprocesses on the caller's event loop.
"""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path
from typing import Any, Sequence

import structlog
import yaml

from strata.core.errors import StackCommandError
from strata.runtime.base import ApplySummary, OutputOptions, ProgramFn, StackHandle

logger = structlog.get_logger()


class PulumiCliRuntime:
    """Drive ``pulumi`` for create/select, config, plugins and actions."""

    def __init__(
        self,
        work_dir: str | Path = ".strata",
        *,
        binary: str = "pulumi",
        backend_url: str | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self._work_dir = Path(work_dir)
        self._binary = binary
        self._backend_url = backend_url
        self._extra_env = dict(env or {})

    def _env(self) -> dict[str, str]:
        env = {**os.environ, **self._extra_env}
        env.setdefault("PULUMI_SKIP_UPDATE_CHECK", "true")
        if self._backend_url:
            env["PULUMI_BACKEND_URL"] = self._backend_url
        return env

    def project_dir(self, project: str, stack: str) -> Path:
        return self._work_dir / project / stack

    def write_project(self, project: str, stack: str, program: dict[str, Any]) -> Path:
        """Render the program document as a YAML Pulumi project."""
        path = self.project_dir(project, stack)
        path.mkdir(parents=True, exist_ok=True)
        document = {
            "name": project,
            "runtime": "yaml",
            "resources": program.get("resources") or {},
            "outputs": program.get("outputs") or {},
        }
        (path / "Pulumi.yaml").write_text(yaml.safe_dump(document, sort_keys=False))
        return path

    async def _run(
        self,
        args: Sequence[str],
        handle: StackHandle,
        options: OutputOptions | None = None,
    ) -> str:
        command = " ".join(a for a in args[:2] if not a.startswith("-"))
        cmd = [self._binary, *args, "--non-interactive"]
        if options is not None:
            cmd.append(f"--color={options.color}")
        timeout = options.timeout_seconds if options is not None else None

        logger.debug("pulumi_command", command=cmd, stack=handle.fully_qualified_name)
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=str(handle.work_dir) if handle.work_dir else None,
            env=self._env(),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise StackCommandError(command, handle.fully_qualified_name, None) from None

        out = stdout.decode(errors="replace")
        if options is not None and options.on_output is not None:
            for line in out.splitlines():
                options.on_output(line)
        if proc.returncode != 0:
            raise StackCommandError(
                command,
                handle.fully_qualified_name,
                proc.returncode,
                stderr.decode(errors="replace"),
            )
        return out

    async def create_or_select(self, project: str, stack: str, program: ProgramFn) -> StackHandle:
        work_dir = self.write_project(project, stack, program(stack))
        handle = StackHandle(project=project, stack=stack, work_dir=work_dir)
        await self._run(["stack", "select", "--create", "--stack", stack], handle)
        return handle

    async def configure(self, handle: StackHandle, key: str, value: str) -> None:
        await self._run(["config", "set", key, value, "--stack", handle.stack], handle)

    async def install_plugin(self, handle: StackHandle, name: str, version: str) -> None:
        await self._run(["plugin", "install", "resource", name, version], handle)

    async def refresh(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._run(["refresh", "--yes", "--stack", handle.stack], handle, options)

    async def preview(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._run(["preview", "--stack", handle.stack], handle, options)

    async def apply(self, handle: StackHandle, options: OutputOptions) -> ApplySummary:
        await self._run(["up", "--yes", "--stack", handle.stack], handle, options)
        raw = await self._run(["stack", "output", "--json", "--stack", handle.stack], handle)
        outputs = json.loads(raw) if raw.strip() else {}
        return ApplySummary(stack=handle.stack, outputs=outputs)

    async def destroy(self, handle: StackHandle, options: OutputOptions) -> None:
        await self._run(["destroy", "--yes", "--stack", handle.stack], handle, options)
