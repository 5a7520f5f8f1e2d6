from enum import Enum, auto, unique


@unique
class FieldKind(Enum):
    PLAIN = auto()
    QUOTED = auto()
    ESCAPED = auto()

    @property
    def quoted(self):
        return self is not FieldKind.PLAIN

    @property
    def escaped(self):
        return self is FieldKind.ESCAPED
