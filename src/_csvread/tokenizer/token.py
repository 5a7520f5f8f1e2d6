from dataclasses import dataclass

from _csvread.tokenizer.field_kind import FieldKind


@dataclass
class FieldToken:
    """
    A field in a csv row. start and end delimit the raw contents
    in the buffer, without enclosing quotes and with escaped quotes
    still doubled.
    """

    kind: FieldKind
    start: int
    end: int
    end_of_row: bool = False

    def get_value(self, buffer):
        """
        :returns: The raw bytes of the field, ie. b'a""b' for a token
            of kind FieldKind.ESCAPED taken from the buffer b'"a""b"'.
        """
        return bytes(buffer[self.start : self.end])

    def __len__(self):
        return self.end - self.start
