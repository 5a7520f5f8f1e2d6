import pathlib
from contextlib import contextmanager

from _csvread.chunk_loader import DEFAULT_CHUNK_SIZE
from _csvread.session import Session


def read(source, **kwargs):
    """
    Reads a whole csv document and returns its rows as a list of tuples
    of bytes, ie. rows = read("/my/file.csv").

    Empty fields are None. See lazy_read for the accepted sources and
    options.
    """
    with lazy_read(source, **kwargs) as rows:
        return list(rows)


@contextmanager
def lazy_read(
    source,
    header=True,
    left_trim=False,
    right_trim=False,
    chunk_size=DEFAULT_CHUNK_SIZE,
    allocate=False,
    copy=True,
):
    """
    Context manager giving an iterator over the rows of a csv document.

    >>> with lazy_read(b"a,b\\n1,2\\n3,4\\n") as rows:
    ...     for row in rows:
    ...         print(row)
    (b'1', b'2')
    (b'3', b'4')

    :param source: A path (str or pathlib.Path) to a csv file, a binary
        stream, or the document itself as bytes.
    :param allocate: For files, read the whole file into memory instead
        of streaming it chunk_size bytes at a time.
    :param copy: For bytes, whether the session works on a copy.
    """
    session = Session(
        header=header,
        left_trim=left_trim,
        right_trim=right_trim,
        chunk_size=chunk_size,
    )
    if isinstance(source, (str, pathlib.Path)):
        session.open_file(source, allocate=allocate)
    elif hasattr(source, "readinto"):
        session.open_stream(source)
    else:
        session.open_string(source, copy=copy)

    try:
        yield iter(session)
    finally:
        session.close()
