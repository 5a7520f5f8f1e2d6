import csvread.version
from _csvread.errors import (
    CsvError,
    CsvMemoryError,
    EmptyDocumentError,
    MalformedRowError,
    NotOpenError,
    RowTooNarrowError,
    RowTooWideError,
    SourceOpenError,
    StreamReadError,
)
from _csvread.reading import lazy_read, read
from _csvread.session import ReadStatus, Session

__author__ = """CsvRead developers"""

__version__ = csvread.version.version

__all__ = [
    "CsvError",
    "CsvMemoryError",
    "EmptyDocumentError",
    "MalformedRowError",
    "NotOpenError",
    "ReadStatus",
    "RowTooNarrowError",
    "RowTooWideError",
    "Session",
    "SourceOpenError",
    "StreamReadError",
    "lazy_read",
    "read",
]
