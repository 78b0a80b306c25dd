"""Compile the standalone ``search`` executable shipped next to ``search.db``."""

from __future__ import annotations

import asyncio
import importlib.util
import logging
from pathlib import Path
import sys
import tempfile

from docset2md.exceptions import SearchToolchainUnavailableError


logger = logging.getLogger(__name__)

DEFAULT_BUILD_TIMEOUT_SECONDS = 600.0
BINARY_NAME = "search"
SEARCH_VARIANTS = ("docc", "standard")
TOOLCHAIN_REMEDIATION = (
    "Install the build toolchain with: pip install 'docset2md[binary]'\n"
    "Then run the conversion again with --index.\n"
    "(search.db was created successfully and can be queried with docset2md-search or any SQLite client)"
)

_LAUNCHER_TEMPLATE = """\
from docset2md.cli.search import main

raise SystemExit(main(variant={variant!r}))
"""


def is_toolchain_installed() -> bool:
    return importlib.util.find_spec("PyInstaller") is not None


async def _run_cli_command(*args: str, timeout_seconds: float) -> tuple[bool, str, str]:
    proc = await asyncio.create_subprocess_exec(
        sys.executable,
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )

    try:
        stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout_seconds)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.communicate()
        return False, "", f"Timed out after {int(timeout_seconds)}s: {' '.join(args)}"

    stdout_text = stdout_bytes.decode("utf-8", errors="replace")
    stderr_text = stderr_bytes.decode("utf-8", errors="replace").strip()

    if proc.returncode != 0:
        message = stderr_text or stdout_text.strip() or f"Command failed: {' '.join(args)}"
        return False, stdout_text, message

    return True, stdout_text, stderr_text


async def build_search_binary(
    output_dir: str | Path,
    variant: str = "standard",
    timeout_seconds: float = DEFAULT_BUILD_TIMEOUT_SECONDS,
) -> bool:
    """Build ``<output_dir>/search`` for the given CLI variant.

    Raises `SearchToolchainUnavailableError` when PyInstaller is missing so
    callers can report remediation; any other build failure returns False.
    """

    if variant not in SEARCH_VARIANTS:
        raise ValueError(f"Unknown search variant: {variant}")
    if not is_toolchain_installed():
        raise SearchToolchainUnavailableError(tool="PyInstaller", remediation=TOOLCHAIN_REMEDIATION)

    output_path = Path(output_dir)
    logger.info("Building search binary (%s)...", variant)

    with tempfile.TemporaryDirectory(prefix="docset2md-build-") as work_dir:
        work = Path(work_dir)
        launcher = work / f"{BINARY_NAME}.py"
        launcher.write_text(_LAUNCHER_TEMPLATE.format(variant=variant), encoding="utf-8")

        ok, _, error = await _run_cli_command(
            "-m",
            "PyInstaller",
            "--onefile",
            "--noconfirm",
            "--log-level",
            "WARN",
            "--name",
            BINARY_NAME,
            "--distpath",
            str(output_path),
            "--workpath",
            str(work / "build"),
            "--specpath",
            str(work),
            str(launcher),
            timeout_seconds=timeout_seconds,
        )

    if not ok:
        logger.error("Failed to build search binary: %s", error)
        return False

    logger.info("Search binary created: %s", output_path / BINARY_NAME)
    return True
