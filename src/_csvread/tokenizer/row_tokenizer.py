from _csvread.tokenizer.common import (
    COMMA,
    QUOTE,
    TERMINATORS,
    field_stop,
    is_end,
    quote,
    terminator_run,
    unquoted_stop,
)
from _csvread.tokenizer.field_kind import FieldKind
from _csvread.tokenizer.token import FieldToken


class RowTokenizer:
    """
    Tokenizes one logical row at a time out of a byte buffer.

    >>> tokenizer = RowTokenizer(b'a,"b""c"\\nd,e', 12)
    >>> [t.get_value(tokenizer.buffer) for t in tokenizer.tokenize_row()]
    [b'a', b'b""c']
    >>> tokenizer.cursor
    9

    The buffer and end may be replaced between rows, the cursor is then
    expected to be set accordingly.
    """

    def __init__(self, buffer, end, cursor=0):
        """
        :param buffer: Any object exposing the buffer protocol.
        :param end: Number of valid bytes in buffer.
        :param cursor: Position of the first byte of the next row.
        """
        self.buffer = buffer
        self.end = end
        self.cursor = cursor

    def reset(self, buffer, end, cursor=0):
        self.buffer = buffer
        self.end = end
        self.cursor = cursor

    def at_end(self):
        return is_end(self.buffer, self.cursor, self.end)

    def __iter__(self):
        return self.tokenize_row()

    def tokenize_row(self):
        """
        Tokenize one logical row starting at the cursor. Yields one
        FieldToken per field, the last one having end_of_row=True, and
        leaves the cursor after the row terminator.
        """
        while True:
            token = self.tokenize_field()
            yield token
            if token.end_of_row:
                return

    def tokenize_field(self):
        """
        Tokenize the field at the cursor and advance the cursor past its
        delimiter, or past the row terminator for the last field of a row.
        """
        buffer = self.buffer
        end = self.end
        pos = self.cursor
        kind = FieldKind.PLAIN

        if pos < end and buffer[pos] == QUOTE:
            kind = FieldKind.QUOTED
            pos += 1
        start = pos

        if kind is FieldKind.PLAIN:
            stop = self._search(unquoted_stop, pos)
            if stop < end and buffer[stop] == QUOTE:
                kind = FieldKind.QUOTED
                start = pos = stop + 1
            else:
                field_end = pos = stop

        if kind is not FieldKind.PLAIN:
            while True:
                closing = self._search(quote, pos)
                if closing >= end:
                    # Unterminated, the field runs to the end of the buffer
                    field_end = pos = end
                    break
                if closing + 1 < end and buffer[closing + 1] == QUOTE:
                    kind = FieldKind.ESCAPED
                    pos = closing + 2
                    continue
                field_end = closing
                pos = self._search(field_stop, closing + 1)
                break

        if pos < end and buffer[pos] == COMMA:
            pos += 1
            # A delimiter directly before the end of the row is dropped
            if not (is_end(buffer, pos, end) or buffer[pos] in TERMINATORS):
                self.cursor = pos
                return FieldToken(kind, start, field_end)

        end_of_row = is_end(buffer, pos, end) or buffer[pos] in TERMINATORS
        if end_of_row:
            pos = terminator_run.match(buffer, pos, end).end()
        self.cursor = pos
        return FieldToken(kind, start, field_end, end_of_row)

    def _search(self, pattern, pos):
        match = pattern.search(self.buffer, pos, self.end)
        if match is None:
            return self.end
        return match.start()
