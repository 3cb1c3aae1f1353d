from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple


class CmdError(Exception):
    pass


# terraform plan -detailed-exitcode
PLAN_NO_CHANGES = 0
PLAN_HAS_CHANGES = 2


def stream(cmd: List[str], cwd: Optional[str]) -> Tuple[int, str]:
    """Execute a command, stream both pipes, and return (rc, stdout text).

    Important: Some callers JSON-parse the return; never mix stderr into it.
    """
    import threading

    print(f"Running: {' '.join(cmd)}")
    proc = subprocess.Popen(
        cmd,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
        bufsize=1,
    )

    stdout_buf: list[str] = []

    def pump(pipe, tag: str) -> None:
        try:
            for line in iter(pipe.readline, ""):
                line = line.rstrip()
                # Echo to console
                print(line, flush=True)
                if tag == "stdout":
                    stdout_buf.append(line)
        finally:
            pipe.close()

    t_out = threading.Thread(target=pump, args=(proc.stdout, "stdout"), daemon=True)
    t_err = threading.Thread(target=pump, args=(proc.stderr, "stderr"), daemon=True)
    t_out.start()
    t_err.start()
    rc = proc.wait()
    t_out.join()
    t_err.join()
    return rc, "\n".join(stdout_buf).strip()


def run(cmd: List[str], cwd: Optional[str]) -> str:
    """Like stream(), but raise CmdError on a non-zero exit code."""
    rc, out_text = stream(cmd, cwd)
    if rc != 0:
        raise CmdError(f"Command failed ({rc}): {' '.join(cmd)}\nSTDOUT:\n{out_text}")
    return out_text


def _resolve_az_exe() -> str:
    # On Windows the CLI ships as az.cmd, which subprocess will not find as "az"
    found = shutil.which("az") or shutil.which("az.cmd")
    if not found:
        raise CmdError("Azure CLI 'az' not found on PATH")
    return found


def az(args: List[str]) -> str:
    return run([_resolve_az_exe(), *args], cwd=None)


def cdktf(project_dir: Path, args: List[str]) -> str:
    return run(["cdktf", *args], cwd=str(project_dir))


def synthesized_stack_dir(project_dir: Path, stack: str) -> Path:
    return project_dir / "cdktf.out" / "stacks" / stack


def plan_has_changes(rc: int) -> bool:
    """Map a `terraform plan -detailed-exitcode` result to changes/no-changes."""
    if rc == PLAN_NO_CHANGES:
        return False
    if rc == PLAN_HAS_CHANGES:
        return True
    raise CmdError(f"terraform plan failed with exit code {rc}")


def terraform_plan_detailed(stack_dir: Path) -> bool:
    """Init + plan the synthesized stack; return True when changes are pending."""
    if not stack_dir.exists():
        raise CmdError(f"Synthesized stack not found: {stack_dir}")
    run(["terraform", "init", "-input=false"], cwd=str(stack_dir))
    rc, _ = stream(
        ["terraform", "plan", "-input=false", "-lock=false", "-detailed-exitcode"],
        cwd=str(stack_dir),
    )
    return plan_has_changes(rc)


def default_project_dir() -> str:
    return os.getenv("CDKTF_PROJECT_DIR", "infra")
