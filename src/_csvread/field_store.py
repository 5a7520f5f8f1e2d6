"""
Storage for the values of the current row. Every column owns one buffer
that is reused from row to row and only reallocated when a longer value
comes along, so reading many rows of similar width settles into no
allocation at all.
"""

import logging

import numpy as np

from _csvread.errors import CsvMemoryError

logger = logging.getLogger(__name__)

SPACE = b" "


class Field:
    """
    A grow-only byte buffer holding the value of one column. The array
    has room for capacity bytes plus a terminating NUL.
    """

    def __init__(self):
        self.buffer = None
        self.capacity = 0
        self.length = 0

    def reserve(self, size):
        """
        Make room for at least size bytes. The old buffer is dropped and a
        new one of exactly size bytes (and terminator) allocated, capacity
        never shrinks.
        """
        if size <= self.capacity:
            return
        logger.debug("New field allocation: capacity %d -> %d", self.capacity, size)
        self.buffer = None
        try:
            self.buffer = np.empty(size + 1, dtype=np.uint8)
        except MemoryError as err:
            self.capacity = 0
            self.length = 0
            raise CsvMemoryError("Out of memory") from err
        self.capacity = size

    def assign(self, raw, escaped=False):
        """
        Materialize a raw field value.

        :param raw: The bytes of the field as found in the document,
            without enclosing quotes.
        :param escaped: Whether raw contains doubled quotes to be collapsed.
        """
        if not raw:
            if self.capacity > 0:
                self.buffer[0] = 0
            self.length = 0
            return

        # Room is made for the raw length, unescaping only ever shortens
        self.reserve(len(raw))
        if escaped:
            raw = raw.replace(b'""', b'"')
        length = len(raw)
        self.buffer[:length] = np.frombuffer(raw, dtype=np.uint8)
        self.buffer[length] = 0
        self.length = length

    @property
    def value(self):
        if self.length == 0:
            return None
        return self.buffer[: self.length].tobytes()

    def release(self):
        self.buffer = None
        self.capacity = 0
        self.length = 0


class FieldStore:
    """
    One Field per column of the schema.

    >>> store = FieldStore(2)
    >>> store.store(0, b" a ", left_trim=True)
    >>> store.get(0), store.get(1), store.get(2)
    (b'a ', None, None)
    """

    def __init__(self, column_count):
        self.fields = [Field() for _ in range(column_count)]

    def store(
        self,
        index,
        raw,
        quoted=False,
        escaped=False,
        left_trim=False,
        right_trim=False,
    ):
        """
        Materialize raw into the field of the given column. Spaces are
        trimmed according to left_trim and right_trim, but never from
        quoted fields.
        """
        if raw and not quoted:
            if left_trim:
                raw = raw.lstrip(SPACE)
            if right_trim:
                raw = raw.rstrip(SPACE)
        self.fields[index].assign(raw, escaped)

    def store_token(self, index, token, buffer, schema):
        self.store(
            index,
            token.get_value(buffer),
            quoted=token.kind.quoted,
            escaped=token.kind.escaped,
            left_trim=schema.left_trim,
            right_trim=schema.right_trim,
        )

    def get(self, index):
        """
        :returns: The value of the field in the given column, or None if
            the field is empty or there is no such column.
        """
        if index < 0 or index >= len(self.fields):
            return None
        return self.fields[index].value

    def values(self):
        return tuple(field.value for field in self.fields)

    def release(self):
        for field in self.fields:
            field.release()
        self.fields = []
