"""Formatter and pager pipeline used to display a manual page."""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol, Sequence

LOGGER = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, text: str) -> None:
        ...


class ProcessPipeline:
    """Feeds troff source through ``formatter | pager``.

    Blocks until both processes exit. There is no timeout.
    """

    def __init__(self, formatter: Sequence[str], pager: Sequence[str]) -> None:
        self.formatter = list(formatter)
        self.pager = list(pager)

    def render(self, text: str) -> None:
        LOGGER.debug("Rendering with %s | %s", " ".join(self.formatter), " ".join(self.pager))
        formatter = subprocess.Popen(  # noqa: S603
            self.formatter, stdin=subprocess.PIPE, stdout=subprocess.PIPE
        )
        source, output = formatter.stdin, formatter.stdout
        try:
            pager = subprocess.Popen(self.pager, stdin=output)  # noqa: S603
        except OSError:
            formatter.kill()
            formatter.wait()
            raise
        # the pager owns the read end now
        output.close()

        try:
            source.write(text.encode("utf-8"))
        except BrokenPipeError:
            LOGGER.debug("Formatter closed its input early")
        finally:
            try:
                source.close()
            except BrokenPipeError:
                pass

        formatter.wait()
        pager.wait()
        if formatter.returncode:
            LOGGER.warning("%s exited with status %d", self.formatter[0], formatter.returncode)
