"""Decompression of manual page sources.

Opening problems are handled according to a :class:`FailurePolicy`:
``ABORT`` raises a :class:`~manfinder.errors.DocumentOpenError` for the
caller to report, ``CONTINUE`` logs it and yields an empty result so that a
rebuild can move on to the next page. Decompression problems never raise;
they are attached to the returned :class:`ExtractionResult` together with
whatever text was decoded before the failure.
"""

from __future__ import annotations

import bz2
import enum
import gzip
import io
import logging
import lzma
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Dict

from manfinder.errors import (
    DecompressionFailure,
    DocumentNotFound,
    DocumentOpenError,
    DocumentPermissionDenied,
)
from manfinder.utils.files import compression_of, parse_document_name

LOGGER = logging.getLogger(__name__)

READ_SIZE = 1 << 16

_DECODERS: Dict[str, Callable[[BinaryIO], BinaryIO]] = {
    "gz": lambda raw: gzip.GzipFile(fileobj=raw),
    "bz2": lambda raw: bz2.BZ2File(raw),
    "xz": lambda raw: lzma.LZMAFile(raw),
}

_FORMAT_NAMES = {"gz": "gzip", "bz2": "bzip2", "xz": "xz"}


class FailurePolicy(enum.Enum):
    ABORT = "abort"
    CONTINUE = "continue"


@dataclass(slots=True)
class ExtractionResult:
    """Decoded text of a document plus the error that cut it short, if any."""

    text: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _names_for(path: Path) -> tuple[str, str]:
    parsed = parse_document_name(path.name)
    if parsed is None:
        return path.name, "?"
    return parsed


def _open_error(path: Path, exc: OSError) -> DocumentOpenError:
    page, section = _names_for(path)
    if isinstance(exc, FileNotFoundError):
        return DocumentNotFound(path, page, section, exc)
    if isinstance(exc, PermissionError):
        return DocumentPermissionDenied(path, page, section, exc)
    return DocumentOpenError(path, page, section, exc)


def decompress(data: bytes, compression: str) -> tuple[bytes, Exception | None]:
    """Decompress ``data`` and return ``(decoded_bytes, error)``.

    On a decoding error the bytes produced before the failure are kept.
    """
    opener = _DECODERS.get(compression)
    if opener is None:
        return b"", ValueError(f"unsupported compression '{compression}'")

    chunks = []
    try:
        with opener(io.BytesIO(data)) as stream:
            while True:
                chunk = stream.read(READ_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
    except (OSError, EOFError, zlib.error, lzma.LZMAError, ValueError) as exc:
        return b"".join(chunks), exc
    return b"".join(chunks), None


def extract_document(path: Path, policy: FailurePolicy = FailurePolicy.ABORT) -> ExtractionResult:
    """Read and decompress the manual page at ``path``."""
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        error = _open_error(path, exc)
        if policy is FailurePolicy.ABORT:
            raise error from exc
        LOGGER.warning("%s", error)
        return ExtractionResult(text="", error=error)

    compression = compression_of(path)
    raw, exc = decompress(data, compression)
    text = raw.decode("utf-8", errors="replace")
    if exc is None:
        return ExtractionResult(text=text)

    page, section = _names_for(path)
    failure = DecompressionFailure(
        path, page, section, _FORMAT_NAMES.get(compression, compression), exc
    )
    LOGGER.error("%s", failure)
    return ExtractionResult(text=text, error=failure)
