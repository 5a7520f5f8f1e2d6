"""
Incremental buffering for streamed documents. The loader keeps one byte
buffer that is refilled from the stream until a complete row is present,
and slides consumed rows out of the front of it, so the buffer only ever
grows to the length of the longest row seen.
"""

import logging
import re
from enum import Enum, auto, unique

import numpy as np

from _csvread.errors import CsvMemoryError, StreamReadError
from _csvread.tokenizer.common import COMMA, QUOTE, terminator_run

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 1024

unquoted_stop = re.compile(b'[\r\n"]')
quoted_field_stop = re.compile(b"[,\r\n]")
quote = re.compile(b'"')


@unique
class ScanState(Enum):
    UNQUOTED = auto()
    QUOTED = auto()
    QUOTE_IN_QUOTED = auto()
    AFTER_QUOTED = auto()


class LineScanner:
    """
    Finds the end of the first row in a buffer that is filled bit by bit.
    Quoting is tracked the same way the row tokenizer does, so that
    terminators inside quoted fields are not taken as the end of the row.
    The position and state are kept between calls to scan, so bytes are
    only looked at once however often the buffer is refilled.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        self.position = 0
        self.state = ScanState.UNQUOTED

    def scan(self, buffer, length):
        """
        Continue scanning buffer up to length.

        :returns: True if a row terminator was found, position is then
            at the terminator.
        """
        pos = self.position
        state = self.state
        found = False
        while pos < length:
            if state is ScanState.UNQUOTED:
                match = unquoted_stop.search(buffer, pos, length)
                if match is None:
                    pos = length
                elif buffer[match.start()] == QUOTE:
                    state = ScanState.QUOTED
                    pos = match.start() + 1
                else:
                    pos = match.start()
                    found = True
                    break
            elif state is ScanState.QUOTED:
                match = quote.search(buffer, pos, length)
                if match is None:
                    pos = length
                else:
                    state = ScanState.QUOTE_IN_QUOTED
                    pos = match.start() + 1
            elif state is ScanState.QUOTE_IN_QUOTED:
                if buffer[pos] == QUOTE:
                    state = ScanState.QUOTED
                    pos += 1
                else:
                    state = ScanState.AFTER_QUOTED
            else:
                match = quoted_field_stop.search(buffer, pos, length)
                if match is None:
                    pos = length
                elif buffer[match.start()] == COMMA:
                    state = ScanState.UNQUOTED
                    pos = match.start() + 1
                else:
                    pos = match.start()
                    found = True
                    break
        self.position = pos
        self.state = state
        return found


class ChunkLoader:
    """
    Owns the buffer of a streamed document.

    The buffer is a numpy array of capacity + 1 bytes where
    buffer[length] is always a NUL byte. Capacity grows by exactly
    chunk_size whenever less than one chunk of headroom is left.
    """

    def __init__(self, stream, chunk_size=DEFAULT_CHUNK_SIZE):
        """
        :param stream: A binary stream supporting readinto.
        :param chunk_size: The number of bytes read from stream at a time.
        """
        self.stream = stream
        self.chunk_size = chunk_size
        self.buffer = np.zeros(1, dtype=np.uint8)
        self.capacity = 0
        self.length = 0
        self.exhausted = False
        self.scanner = LineScanner()
        # Set after a row is consumed: terminator bytes at the start of the
        # buffer still belong to that row.
        self.skip_terminators = False

    def ensure_row(self):
        """
        Read from the stream until the buffer holds one complete row.

        :returns: True if a row is available at the start of the buffer,
            False if the stream is exhausted and nothing is buffered.
        """
        self.scanner.reset()
        while True:
            if self.skip_terminators:
                self.drop_terminators()
            if not self.skip_terminators and self.scanner.scan(
                self.buffer, self.length
            ):
                return True
            if self.exhausted:
                return self.length > 0
            self.refill()

    def drop_terminators(self):
        count = terminator_run.match(self.buffer, 0, self.length).end()
        if count:
            self.shift(count)
        if self.length > 0:
            self.skip_terminators = False

    def grow(self):
        new_capacity = self.capacity + self.chunk_size
        logger.debug("Increasing buffer from %d to %d", self.capacity, new_capacity)
        try:
            new_buffer = np.empty(new_capacity + 1, dtype=np.uint8)
        except MemoryError as err:
            raise CsvMemoryError("Out of memory") from err
        new_buffer[: self.length + 1] = self.buffer[: self.length + 1]
        self.buffer = new_buffer
        self.capacity = new_capacity

    def refill(self):
        """
        Append up to one chunk from the stream, growing the buffer first
        if needed. A read of zero bytes marks the stream as exhausted.
        """
        if self.length + self.chunk_size >= self.capacity:
            self.grow()

        window = memoryview(self.buffer)[self.length : self.length + self.chunk_size]
        try:
            count = self.stream.readinto(window)
        except OSError as err:
            raise StreamReadError(f"Read error: {err.strerror or err}") from err
        finally:
            window.release()

        if not count:
            self.exhausted = True
            count = 0
        self.length += count
        self.buffer[self.length] = 0

    def shift(self, count):
        """
        Discard the first count bytes of the buffer, keeping its capacity.
        """
        remaining = self.length - count
        self.buffer[:remaining] = self.buffer[count : self.length]
        self.length = remaining
        self.buffer[self.length] = 0

    def consume(self, count):
        self.shift(count)
        self.skip_terminators = True

    def close(self, close_stream=True):
        if close_stream and self.stream is not None:
            self.stream.close()
        self.stream = None
        self.buffer = None
        self.capacity = 0
        self.length = 0
