import re

COMMA = ord(",")
QUOTE = ord('"')
CR = ord("\r")
LF = ord("\n")
NUL = 0

TERMINATORS = (CR, LF)

# Stops of an unquoted scan, a quote switches the field to quoted.
unquoted_stop = re.compile(b'[,\r\n"\x00]')

# Stops when skipping bytes trailing a closing quote.
field_stop = re.compile(b"[,\r\n\x00]")

quote = re.compile(b'"')

terminator_run = re.compile(b"[\r\n]*")


def is_end(buffer, pos, end):
    """
    :returns: Whether pos is at the end of the data in buffer, that is
        beyond end or at a NUL byte.
    """
    return pos >= end or buffer[pos] == NUL
