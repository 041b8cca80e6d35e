"""Run AppleScript snippets through osascript."""

import asyncio
import shutil


async def run_command(*args: str) -> str:
    """Run a command and return its stripped stdout.

    Raises:
        RuntimeError: the command is missing or exits non-zero.
    """
    if shutil.which(args[0]) is None:
        raise RuntimeError(f"{args[0]} not found")

    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise RuntimeError(f"{args[0]} exited {proc.returncode}: {stderr.decode(errors='replace').strip()}")
    return stdout.decode("utf-8", errors="replace").strip()


async def run_applescript(script: str) -> str:
    return await run_command("osascript", "-e", script)
