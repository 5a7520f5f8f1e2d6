import logging
import warnings
from enum import Enum, auto, unique
from functools import wraps

from _csvread.chunk_loader import DEFAULT_CHUNK_SIZE
from _csvread.errors import (
    CsvError,
    EmptyDocumentError,
    NotOpenError,
    RowTooNarrowError,
    RowTooWideError,
)
from _csvread.field_store import FieldStore
from _csvread.schema import Schema
from _csvread.sources import open_source
from _csvread.tokenizer import RowTokenizer

logger = logging.getLogger(__name__)

# Size of the last error slot, messages are cut to ERROR_SIZE - 1 characters.
ERROR_SIZE = 64


@unique
class ReadStatus(Enum):
    OK = auto()
    EOF = auto()


def records_error(func):
    """
    Decorator for Session methods which keeps the message of any CsvError
    raised as the last error of the session before passing it on.
    """

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except CsvError as err:
            self._error = str(err)[: ERROR_SIZE - 1]
            raise

    return wrapper


class Session:
    """
    Reads a csv document one row at a time.

    >>> session = Session()
    >>> session.open_string(b"First,Last\\nJohn,Smith\\n")
    >>> session.read()
    <ReadStatus.OK: 1>
    >>> session.get(0), session.get(1)
    (b'John', b'Smith')
    >>> session.read()
    <ReadStatus.EOF: 2>
    >>> session.close()

    The first row of the document decides the number of columns, every
    following row has to have exactly that many fields. With header=True
    (the default) the first row is only used for this and not returned by
    read().

    Options have to be set before opening a document, they are fixed for
    the document once it is opened.

    A session is not safe to share between threads. After read() has
    raised, the session has to be closed and reopened before reading again.
    """

    def __init__(
        self,
        header=True,
        left_trim=False,
        right_trim=False,
        chunk_size=DEFAULT_CHUNK_SIZE,
    ):
        self._source = None
        self._schema = None
        self._fields = None
        self._tokenizer = None
        self._line = 0
        self._error = ""

        self._header = bool(header)
        self._left_trim = bool(left_trim)
        self._right_trim = bool(right_trim)
        self._chunk_size = DEFAULT_CHUNK_SIZE
        self.chunk_size = chunk_size

    def configure(
        self,
        header=True,
        left_trim=False,
        right_trim=False,
        chunk_size=DEFAULT_CHUNK_SIZE,
    ):
        self.header = header
        self.left_trim = left_trim
        self.right_trim = right_trim
        self.chunk_size = chunk_size

    def _warn_if_open(self, option):
        if self.is_open:
            warnings.warn(
                f"Setting {option} while a document is open only takes "
                "effect when the next document is opened."
            )

    @property
    def header(self):
        return self._header

    @header.setter
    def header(self, value):
        self._warn_if_open("header")
        self._header = bool(value)

    @property
    def left_trim(self):
        return self._left_trim

    @left_trim.setter
    def left_trim(self, value):
        self._warn_if_open("left_trim")
        self._left_trim = bool(value)

    @property
    def right_trim(self):
        return self._right_trim

    @right_trim.setter
    def right_trim(self, value):
        self._warn_if_open("right_trim")
        self._right_trim = bool(value)

    def set_trim(self, value):
        self.left_trim = value
        self.right_trim = value

    @property
    def chunk_size(self):
        return self._chunk_size

    @chunk_size.setter
    def chunk_size(self, value):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"chunk_size has to be a positive integer, got {value}")
        self._warn_if_open("chunk_size")
        self._chunk_size = value

    @property
    def is_open(self):
        return self._source is not None

    @property
    def line(self):
        """
        The number of the row last read, counting from 1 and including
        the header row.
        """
        return self._line

    @property
    def column_count(self):
        if self._schema is None:
            return 0
        return self._schema.column_count

    def last_error(self):
        """
        :returns: The message of the last error, or the empty string. The
            message is kept until the session is closed, opening another
            document does not clear it.
        """
        return self._error

    @records_error
    def open_file(self, path, allocate=False):
        """
        Open the csv file at path.

        :param allocate: If True, the whole file is read into memory and
            closed right away, otherwise it is kept open and read
            chunk_size bytes at a time.
        """
        self._open(path=path, allocate=allocate)

    @records_error
    def open_string(self, data, copy=True):
        """
        Open a document given as bytes (or str, which is encoded as utf-8).

        :param copy: If False, data is read in place and must not be
            changed until the session is closed.
        """
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._open(data=data, copy=copy)

    @records_error
    def open_stream(self, stream):
        """
        Open a binary stream, which is read chunk_size bytes at a time.
        The stream is not closed by the session.
        """
        self._open(stream=stream)

    def _open(self, **source_args):
        if self.is_open:
            self._release()

        source = open_source(chunk_size=self._chunk_size, **source_args)
        self._source = source
        self._schema = Schema(self._header, self._left_trim, self._right_trim)
        self._tokenizer = RowTokenizer(source.buffer, source.end, source.cursor)
        try:
            if self._read() is ReadStatus.EOF:
                raise EmptyDocumentError("No rows found")
        except CsvError:
            self._release()
            raise
        logger.debug(
            "Opened %s with %d columns",
            type(source).__name__,
            self._schema.column_count,
        )

    @records_error
    def read(self):
        """
        Read the next row of the document.

        :returns: ReadStatus.OK if a row was read, its values are then
            available through get(), ReadStatus.EOF if there are no
            more rows.
        :raises CsvError: If the row could not be read.
        """
        if self._source is None:
            raise NotOpenError("No source open")
        return self._read()

    def _read(self):
        source = self._source
        if not source.ensure_row():
            return ReadStatus.EOF

        self._tokenizer.reset(source.buffer, source.end, source.cursor)
        counting = not self._schema.established
        self._read_line(counting)

        if counting and not self._schema.header:
            # The first row is data, read it again
            source.rewind()
            self._line -= 1
        else:
            source.consume(self._tokenizer.cursor)
        return ReadStatus.OK

    def _read_line(self, counting):
        self._line += 1
        logger.debug("Reading line %d", self._line)

        schema = self._schema
        index = 0
        for token in self._tokenizer.tokenize_row():
            if counting:
                schema.column_count += 1
            else:
                if index == schema.column_count:
                    raise RowTooWideError(
                        f"Found more than {schema.column_count} fields "
                        f"on line {self._line}",
                        self._line,
                    )
                self._fields.store_token(index, token, self._tokenizer.buffer, schema)
            index += 1

        if counting:
            self._fields = FieldStore(schema.column_count)
        elif index != schema.column_count:
            raise RowTooNarrowError(
                f"Expected {schema.column_count} fields but found {index} "
                f"on line {self._line}",
                self._line,
                schema.column_count,
                index,
            )

    @records_error
    def get(self, index):
        """
        :returns: The value of the field in the given column of the current
            row as bytes, or None if the field is empty or there is no such
            column.
        """
        if self._fields is None:
            raise NotOpenError("No source open")
        return self._fields.get(index)

    field = get

    @property
    @records_error
    def row(self):
        """
        The values of the current row, None for empty fields.
        """
        if self._fields is None:
            raise NotOpenError("No source open")
        return self._fields.values()

    def _release(self):
        if self._source is not None:
            self._source.close()
        if self._fields is not None:
            self._fields.release()
        self._source = None
        self._schema = None
        self._fields = None
        self._tokenizer = None
        self._line = 0

    def close(self):
        """
        Release the document and everything read from it, the session can
        then be used to open another document.
        """
        if self._source is not None:
            logger.debug("Closing after %d lines", self._line)
        self._release()
        self._error = ""

    def __enter__(self):
        return self

    def __exit__(self, *_):
        self.close()

    def __iter__(self):
        while self.read() is ReadStatus.OK:
            yield self.row
