from dataclasses import dataclass


@dataclass
class Schema:
    """
    The shape of a document: the parsing options in effect when it was
    opened and the number of columns, counted from the first row.
    """

    header: bool = True
    left_trim: bool = False
    right_trim: bool = False
    column_count: int = 0

    @property
    def established(self):
        return self.column_count > 0
