"""Filesystem helpers shared by deploy, sync and import."""

from __future__ import annotations

import asyncio
import logging
import os
import shutil
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

import aiofiles
import aiofiles.os

logger = logging.getLogger(__name__)

# Version-control metadata never travels with a deployed skill.
COPY_SKIP_DIRS = frozenset({".git"})


async def exists(path: Path) -> bool:
    return await aiofiles.os.path.exists(path)


async def is_dir(path: Path) -> bool:
    return await aiofiles.os.path.isdir(path)


async def ensure_dir(path: Path) -> None:
    await aiofiles.os.makedirs(path, exist_ok=True)


async def read_text(path: Path, encoding: str = "utf-8") -> str:
    async with aiofiles.open(path, encoding=encoding) as handle:
        return await handle.read()


async def write_text(path: Path, content: str) -> None:
    async with aiofiles.open(path, "w", encoding="utf-8") as handle:
        await handle.write(content)


async def copy_file(src: Path, dst: Path) -> None:
    async with aiofiles.open(src, "rb") as reader, aiofiles.open(dst, "wb") as writer:
        while True:
            chunk = await reader.read(1024 * 128)
            if not chunk:
                break
            await writer.write(chunk)
    # Keep executable bits on bundled scripts.
    await asyncio.to_thread(shutil.copymode, src, dst)


async def copy_tree(src: Path, dst: Path) -> None:
    """Copy ``src`` into ``dst``, following symlinked files and directories.

    Raises:
        OSError: A directory is reached twice through symlinks, or a link is broken.
    """

    def _walk() -> list[tuple[Path, list[str], list[str]]]:
        results = []
        seen: set[str] = set()
        for root, dirs, files in os.walk(src, followlinks=True):
            real = os.path.realpath(root)
            if real in seen:
                raise OSError(f"Directory reached twice through symlinks: {root}")
            seen.add(real)
            dirs[:] = [d for d in dirs if d not in COPY_SKIP_DIRS]
            results.append((Path(root), list(dirs), files))
        return results

    entries = await asyncio.to_thread(_walk)
    await aiofiles.os.makedirs(dst, exist_ok=True)
    for root, dirs, files in entries:
        rel = root.relative_to(src)
        target_dir = dst / rel
        await aiofiles.os.makedirs(target_dir, exist_ok=True)
        for filename in files:
            await copy_file(root / filename, target_dir / filename)
        for dirname in dirs:
            await aiofiles.os.makedirs(target_dir / dirname, exist_ok=True)


async def remove_path(path: Path) -> None:
    """Remove a file or a whole directory tree."""
    if await aiofiles.os.path.isdir(path) and not await aiofiles.os.path.islink(path):
        await asyncio.to_thread(shutil.rmtree, path)
    else:
        await aiofiles.os.remove(path)


async def list_subdirs(path: Path) -> list[Path]:
    def _collect() -> list[Path]:
        return sorted((p for p in path.iterdir() if p.is_dir()), key=lambda p: p.name)

    return await asyncio.to_thread(_collect)


@asynccontextmanager
async def temporary_directory(prefix: str) -> AsyncIterator[Path]:
    """Yield a fresh temp dir and remove it on every exit path."""
    temp_dir = Path(await asyncio.to_thread(tempfile.mkdtemp, prefix=prefix))
    logger.debug(f"Created temporary directory {temp_dir}")
    try:
        yield temp_dir
    finally:
        try:
            await asyncio.to_thread(shutil.rmtree, temp_dir)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Failed to remove temporary directory {temp_dir}: {e}")
