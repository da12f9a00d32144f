"""File-existence check."""
from __future__ import annotations

import asyncio
import os
from collections.abc import Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from healthy.context.metadata import CheckContext


class FileCheck:
    """Healthy once *path* exists.

    Any ``OSError`` from ``os.stat`` (missing file, permission denied) is a
    retryable failure.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = os.fspath(path)

    @property
    def path(self) -> str:
        return self._path

    async def healthy(self, ctx: CheckContext) -> None:
        await asyncio.get_running_loop().run_in_executor(None, os.stat, self._path)

    def metadata(self) -> Mapping[str, object]:
        return {"type": "file", "target": self._path}

    def __repr__(self) -> str:
        return f"FileCheck({self._path!r})"

