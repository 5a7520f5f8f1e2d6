class CsvError(Exception):
    """
    Base class for all errors raised by a csv session. The message
    is also kept as the session's last error.
    """

    pass


class SourceOpenError(CsvError):
    """
    Raised when the underlying file could not be opened or read
    while opening a session.
    """

    pass


class EmptyDocumentError(SourceOpenError):
    """
    Raised when opening a document that contains no rows, so no
    schema can be established.
    """

    pass


class CsvMemoryError(CsvError):
    """
    Raised when the document buffer or a field buffer could not be grown.
    """

    pass


class MalformedRowError(CsvError):
    """
    Raised when a row does not have the number of fields established
    by the first row of the document.
    """

    def __init__(self, message, line):
        super().__init__(message)
        self.line = line


class RowTooWideError(MalformedRowError):
    pass


class RowTooNarrowError(MalformedRowError):
    def __init__(self, message, line, expected, found):
        super().__init__(message, line)
        self.expected = expected
        self.found = found


class StreamReadError(CsvError):
    """
    Raised when reading the next chunk of a streamed file fails.
    """

    pass


class NotOpenError(CsvError):
    """
    Raised when reading from a session that has no open source.
    """

    pass
