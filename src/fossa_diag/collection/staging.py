"""Temporary directories for collected data, packed into a tarball on every exit path."""

from __future__ import annotations

import logging
import shutil
import signal
import tarfile
import tempfile
from pathlib import Path
from types import FrameType, TracebackType
from typing import Any

from rich.console import Console
from rich.filesize import decimal

logger = logging.getLogger(__name__)

# SIGINT already surfaces as KeyboardInterrupt
TERMINATION_SIGNALS = tuple(
    sig for sig in (getattr(signal, "SIGTERM", None), getattr(signal, "SIGHUP", None)) if sig is not None
)


def _raise_system_exit(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


def pack_archive(output_path: Path, source_dir: Path) -> Path:
    """Write the contents of ``source_dir`` to a gzip tarball rooted at ``.``."""
    with tarfile.open(output_path, "w:gz") as archive:
        archive.add(source_dir, arcname=".")
    return output_path


class StagingArea:
    """
    Owns the scratch and capture directories for one run.

    Entering creates both directories and routes termination signals into
    ``SystemExit`` so that ``__exit__`` always runs. Exiting, whether by return,
    fatal error, or interrupt, packs the capture directory into the output
    archive and removes both directories. Exceptions propagate unchanged.
    """

    def __init__(self, output_path: Path, console: Console) -> None:
        self.output_path = output_path
        self.console = console
        self.scratch_dir: Path | None = None
        self.capture_dir: Path | None = None
        self.archive_path: Path | None = None
        self._previous_handlers: dict[int, Any] = {}

    def __enter__(self) -> StagingArea:
        self.scratch_dir = Path(tempfile.mkdtemp(prefix="fossa-diag-tmp-"))
        self.console.print(
            f"Using temp directory for non-collected information: {self.scratch_dir}",
            markup=False,
            highlight=False,
        )
        self.capture_dir = Path(tempfile.mkdtemp(prefix="fossa-diag-"))
        self.console.print(
            f"Using temp directory for collected information: {self.capture_dir}",
            markup=False,
            highlight=False,
        )
        for sig in TERMINATION_SIGNALS:
            try:
                self._previous_handlers[sig] = signal.signal(sig, _raise_system_exit)
            except ValueError:
                # signal handlers can only be installed from the main thread
                logger.debug("Could not install handler for signal %s", sig)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is not None:
                logger.warning("Collection stopped early (%s); archiving what was collected", exc_type.__name__)
            self.archive_path = self._pack()
        finally:
            for sig, handler in self._previous_handlers.items():
                signal.signal(sig, handler)
            self._previous_handlers.clear()
            self._cleanup()

    @property
    def scratch(self) -> Path:
        """Directory for working files that stay out of the archive."""
        if self.scratch_dir is None:
            raise RuntimeError("staging area is not open")
        return self.scratch_dir

    @property
    def capture(self) -> Path:
        if self.capture_dir is None:
            raise RuntimeError("staging area is not open")
        return self.capture_dir

    def path(self, name: str) -> Path:
        """Path of a file to be collected into the archive."""
        return self.capture / name

    def write(self, name: str, content: str) -> Path:
        target = self.path(name)
        target.write_text(content, encoding="utf-8")
        return target

    def _pack(self) -> Path:
        capture = self.capture
        self.console.print()
        self.console.print(f"Creating a tarball from contents of: {capture}", markup=False, highlight=False)
        for entry in sorted(capture.rglob("*")):
            logger.debug("Archiving %s", entry.relative_to(capture))
        archive = pack_archive(self.output_path, capture)
        self.console.print()
        self.console.print("Archive with information created:")
        self.console.print(
            f"{archive} ({decimal(archive.stat().st_size)})", markup=False, highlight=False
        )
        return archive

    def _cleanup(self) -> None:
        for directory in (self.scratch_dir, self.capture_dir):
            if directory is not None:
                shutil.rmtree(directory, ignore_errors=True)
