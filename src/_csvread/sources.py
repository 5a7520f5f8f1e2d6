"""
The four places a document can be read from. All of them present the
document as a byte buffer with a cursor at the start of the next row, and
differ only in who owns the buffer and in how much of the document it
holds at a time.
"""

import logging
import os
from abc import ABC, abstractmethod

import numpy as np

from _csvread.chunk_loader import DEFAULT_CHUNK_SIZE, ChunkLoader
from _csvread.errors import CsvMemoryError, SourceOpenError
from _csvread.tokenizer.common import is_end

logger = logging.getLogger(__name__)


def os_message(err):
    return err.strerror or str(err)


def terminated_copy(data):
    """
    :returns: A numpy array holding a copy of data followed by a NUL byte.
    """
    view = np.frombuffer(data, dtype=np.uint8)
    try:
        buffer = np.empty(view.size + 1, dtype=np.uint8)
    except MemoryError as err:
        raise CsvMemoryError("Out of memory") from err
    buffer[: view.size] = view
    buffer[view.size] = 0
    return buffer


class Source(ABC):
    """
    A document presented as buffer[cursor:end].
    """

    @property
    @abstractmethod
    def buffer(self):
        pass

    @property
    @abstractmethod
    def end(self):
        pass

    @property
    @abstractmethod
    def cursor(self):
        pass

    @abstractmethod
    def ensure_row(self):
        """
        Make sure a complete row starts at cursor.

        :returns: False if there are no more rows.
        """
        pass

    @abstractmethod
    def consume(self, cursor):
        """
        Mark everything before cursor as read.
        """
        pass

    @abstractmethod
    def rewind(self):
        """
        Go back to the start of the row most recently made available.
        """
        pass

    def close(self):
        pass


class InMemorySource(Source):
    """
    A document held entirely in one buffer, so every row is always
    available and reading is only a matter of moving the cursor.
    """

    def __init__(self, buffer, end):
        self._buffer = buffer
        self._end = end
        self._cursor = 0

    @property
    def buffer(self):
        return self._buffer

    @property
    def end(self):
        return self._end

    @property
    def cursor(self):
        return self._cursor

    def ensure_row(self):
        return not is_end(self._buffer, self._cursor, self._end)

    def consume(self, cursor):
        self._cursor = cursor

    def rewind(self):
        self._cursor = 0

    def close(self):
        self._buffer = None
        self._end = 0
        self._cursor = 0


class OwnedFileSource(InMemorySource):
    """
    The whole file read into an owned buffer, the file itself is closed
    as soon as it has been read.
    """

    def __init__(self, path):
        try:
            with open(path, "rb") as stream:
                size = os.fstat(stream.fileno()).st_size
                try:
                    buffer = np.empty(size + 1, dtype=np.uint8)
                except MemoryError as err:
                    raise CsvMemoryError("Out of memory") from err
                count = stream.readinto(memoryview(buffer)[:size])
        except OSError as err:
            raise SourceOpenError(os_message(err)) from err
        if count != size:
            raise SourceOpenError(
                f"Read error: expected {size} bytes but read {count}"
            )
        buffer[size] = 0
        logger.debug("Read %d bytes from %s", size, path)
        super().__init__(buffer, size)


class OwnedStringSource(InMemorySource):
    """
    A private copy of the given bytes.
    """

    def __init__(self, data):
        buffer = terminated_copy(data)
        super().__init__(buffer, buffer.size - 1)


class BorrowedStringSource(InMemorySource):
    """
    A read-only view of the given bytes, nothing is copied so the caller
    has to keep data alive and unchanged while it is being read.
    """

    def __init__(self, data):
        buffer = np.frombuffer(data, dtype=np.uint8)
        super().__init__(buffer, buffer.size)


class StreamingFileSource(Source):
    """
    A file read one chunk at a time, see ChunkLoader. Rows always start
    at the front of the buffer.
    """

    def __init__(self, stream, chunk_size=DEFAULT_CHUNK_SIZE, owns_stream=True):
        """
        :param stream: A binary stream supporting readinto.
        :param owns_stream: Whether the stream is closed with the source.
        """
        self.loader = ChunkLoader(stream, chunk_size)
        self.owns_stream = owns_stream

    @classmethod
    def from_path(cls, path, chunk_size=DEFAULT_CHUNK_SIZE):
        try:
            stream = open(path, "rb")
        except OSError as err:
            raise SourceOpenError(os_message(err)) from err
        return cls(stream, chunk_size)

    @property
    def buffer(self):
        return self.loader.buffer

    @property
    def end(self):
        return self.loader.length

    @property
    def cursor(self):
        return 0

    def ensure_row(self):
        return self.loader.ensure_row()

    def consume(self, cursor):
        self.loader.consume(cursor)

    def rewind(self):
        pass

    def close(self):
        self.loader.close(close_stream=self.owns_stream)


def open_source(
    path=None,
    data=None,
    stream=None,
    allocate=False,
    copy=True,
    chunk_size=DEFAULT_CHUNK_SIZE,
):
    """
    Create the source for exactly one of path, data or stream.

    :param allocate: For path, read the whole file into memory instead of
        streaming it.
    :param copy: For data, take a private copy instead of borrowing it.
    """
    if sum(arg is not None for arg in (path, data, stream)) != 1:
        raise ValueError("Exactly one of path, data or stream has to be given")
    if path is not None:
        if allocate:
            return OwnedFileSource(path)
        return StreamingFileSource.from_path(path, chunk_size)
    if stream is not None:
        return StreamingFileSource(stream, chunk_size, owns_stream=False)
    if copy:
        return OwnedStringSource(data)
    return BorrowedStringSource(data)
