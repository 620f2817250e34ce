"""Shared fixtures: compressed manual pages written under a temporary root."""

from __future__ import annotations

import bz2
import gzip
import lzma
from pathlib import Path
from typing import Callable

import pytest

MAN1 = """.TH MAN 1 "2024-01-01" "man-db"
.SH NAME
man \\- an interface to the system reference manuals
.SH SYNOPSIS
.B man
[\\fIpage\\fR]
"""

MAN7 = """.TH MAN 7
.SH "NAME"
man \\- macros to format man pages
.SH DESCRIPTION
The man package formats pages.
"""

LS1_MDOC = """.Dd March 1, 2024
.Dt LS 1
.Os
.Sh NAME
.Nm ls
.Nd list directory contents
.Sh SYNOPSIS
"""

NO_NAME = """.TH PLAIN 1
.SH SYNOPSIS
plain \\- this is not a name section
"""

_COMPRESSORS = {"gz": gzip.compress, "bz2": bz2.compress, "xz": lzma.compress}

PageWriter = Callable[..., Path]


@pytest.fixture
def man_root(tmp_path: Path) -> Path:
    root = tmp_path / "man"
    root.mkdir()
    return root


@pytest.fixture
def write_page(man_root: Path) -> PageWriter:
    """Write ``filename`` (e.g. ``"man.1.gz"``) into ``<root>/man<N>/``."""

    def _write(filename: str, text: str, *, raw: bytes | None = None) -> Path:
        section_digit = filename.split(".")[-2][0]
        directory = man_root / f"man{section_digit}"
        directory.mkdir(exist_ok=True)
        path = directory / filename
        if raw is None:
            raw = _COMPRESSORS[filename.rsplit(".", 1)[-1]](text.encode("utf-8"))
        path.write_bytes(raw)
        return path

    return _write


@pytest.fixture
def page_texts() -> dict[str, str]:
    return {"man.1": MAN1, "man.7": MAN7, "ls.1": LS1_MDOC, "plain.1": NO_NAME}


@pytest.fixture
def populated_root(man_root: Path, write_page: PageWriter) -> Path:
    """A root holding man(1), man(7), ls(1) and a page without NAME section."""
    write_page("man.1.gz", MAN1)
    write_page("man.7.gz", MAN7)
    write_page("ls.1.gz", LS1_MDOC)
    write_page("plain.1.gz", NO_NAME)
    return man_root
