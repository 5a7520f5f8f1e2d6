"""
In this module, a tokenizer walks a byte buffer from a cursor and generates
field tokens. A token does not hold the field value, only the span of the
raw value in the buffer together with how it was quoted, so that the caller
can decide whether and how to materialize it.

The format is fixed: fields are delimited by commas, may be enclosed in
double quotes, and a double quote inside a quoted field is written twice.
Rows end at any run of carriage-return and line-feed bytes, so blank lines
never produce rows.

Three quirks are kept deliberately:

* A double quote met in the middle of an unquoted field starts a quoted
  field at that position, discarding what was scanned before it, ie.
  ' "a"' gives the value 'a'.
* Anything between a closing quote and the next delimiter or terminator is
  dropped, ie. '"a"bc' gives the value 'a'.
* A delimiter directly followed by a terminator or the end of the data
  ends the row without adding a field, ie. 'a,b,' is a row of two fields.

The buffer can be anything exposing the buffer protocol, a NUL byte or the
given end position terminates the scan.
"""

from .field_kind import FieldKind
from .row_tokenizer import RowTokenizer
from .token import FieldToken

__all__ = ["FieldKind", "FieldToken", "RowTokenizer"]
