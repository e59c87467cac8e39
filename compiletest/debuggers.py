"""Detect installed debuggers by running them."""

import asyncio
import logging

log = logging.getLogger(__name__)


async def get_version_line(program: str) -> str | None:
    """Return the first line printed by ``<program> --version``.

    Returns:
        The banner line, or None if the program is missing or fails

    """
    try:
        process = await asyncio.create_subprocess_exec(
            program,
            "--version",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError:
        log.info("Debugger not found: %s", program)
        return None

    stdout, _ = await process.communicate()
    if process.returncode != 0:
        log.info("%s --version exited with status %s", program, process.returncode)
        return None

    lines = stdout.decode(errors="replace").splitlines()
    return lines[0] if lines else None
