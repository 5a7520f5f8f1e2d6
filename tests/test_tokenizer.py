import numpy as np
import pytest

from _csvread.tokenizer import FieldKind, RowTokenizer


@pytest.fixture(params=[bytes, lambda b: np.frombuffer(b, dtype=np.uint8)])
def row_tokenizer(request):
    def make_tokenizer(contents):
        return RowTokenizer(request.param(contents), len(contents))

    return make_tokenizer


def tokenize(tokenizer):
    return [(t.kind, t.get_value(tokenizer.buffer)) for t in tokenizer.tokenize_row()]


def test_tokenize_plain_row(row_tokenizer):
    tokenizer = row_tokenizer(b"John,Smith,55\nJane,Doe,43")
    assert tokenize(tokenizer) == [
        (FieldKind.PLAIN, b"John"),
        (FieldKind.PLAIN, b"Smith"),
        (FieldKind.PLAIN, b"55"),
    ]
    assert tokenizer.cursor == 14
    assert [v for _, v in tokenize(tokenizer)] == [b"Jane", b"Doe", b"43"]
    assert tokenizer.at_end()


def test_only_last_field_ends_row(row_tokenizer):
    tokens = list(row_tokenizer(b"a,b,c\n").tokenize_row())
    assert [t.end_of_row for t in tokens] == [False, False, True]


def test_tokenize_escaped_field(row_tokenizer):
    tokenizer = row_tokenizer(b'"a""b",c')
    assert tokenize(tokenizer) == [
        (FieldKind.ESCAPED, b'a""b'),
        (FieldKind.PLAIN, b"c"),
    ]


def test_quoted_field_keeps_delimiters_and_terminators(row_tokenizer):
    tokenizer = row_tokenizer(b'"592 5th street, SW","a\r\nb"\nnext')
    assert tokenize(tokenizer) == [
        (FieldKind.QUOTED, b"592 5th street, SW"),
        (FieldKind.QUOTED, b"a\r\nb"),
    ]
    assert bytes(tokenizer.buffer[tokenizer.cursor :]) == b"next"


def test_quote_inside_unquoted_field_restarts_field(row_tokenizer):
    tokenizer = row_tokenizer(b'x, "125 Basic Street",ab"c"d')
    assert tokenize(tokenizer) == [
        (FieldKind.PLAIN, b"x"),
        (FieldKind.QUOTED, b"125 Basic Street"),
        (FieldKind.QUOTED, b"c"),
    ]


def test_bytes_after_closing_quote_are_dropped(row_tokenizer):
    tokenizer = row_tokenizer(b'"John"  ,"Smith" x"y"\nz')
    assert tokenize(tokenizer) == [
        (FieldKind.QUOTED, b"John"),
        (FieldKind.QUOTED, b"Smith"),
    ]
    assert tokenizer.cursor == 22


def test_unterminated_quote_runs_to_end(row_tokenizer):
    tokenizer = row_tokenizer(b'a,"b,c\nd')
    assert tokenize(tokenizer) == [
        (FieldKind.PLAIN, b"a"),
        (FieldKind.QUOTED, b"b,c\nd"),
    ]
    assert tokenizer.at_end()


@pytest.mark.parametrize("terminator", [b"\n", b"\r", b"\r\n", b"\n\n\n", b"\r\n\r\n\n"])
def test_terminator_runs_end_one_row(row_tokenizer, terminator):
    tokenizer = row_tokenizer(b"a,b" + terminator + b"c,d")
    assert [v for _, v in tokenize(tokenizer)] == [b"a", b"b"]
    assert tokenizer.cursor == 3 + len(terminator)
    assert [v for _, v in tokenize(tokenizer)] == [b"c", b"d"]


def test_empty_fields(row_tokenizer):
    tokenizer = row_tokenizer(b'a,,"",b\n')
    assert [len(t) for t in tokenizer.tokenize_row()] == [1, 0, 0, 1]
    assert tokenizer.at_end()


@pytest.mark.parametrize("terminator", [b"\n", b"\r\n", b"\n\r\n", b"\0", b""])
def test_trailing_delimiter_ends_row(row_tokenizer, terminator):
    tokenizer = row_tokenizer(b'a,"",' + terminator)
    tokens = list(tokenizer.tokenize_row())
    assert [len(t) for t in tokens] == [1, 0]
    assert tokens[-1].end_of_row
    assert tokenizer.at_end()


def test_trailing_delimiter_at_end_of_buffer(row_tokenizer):
    tokens = list(row_tokenizer(b"a,").tokenize_row())
    assert len(tokens) == 1
    assert tokens[0].end_of_row
    assert len(tokens[0]) == 1


def test_delimiter_before_blank_lines_ends_row(row_tokenizer):
    tokenizer = row_tokenizer(b"a,b,\n\n\nc,d")
    assert [v for _, v in tokenize(tokenizer)] == [b"a", b"b"]
    assert tokenizer.cursor == 7
    assert [v for _, v in tokenize(tokenizer)] == [b"c", b"d"]


def test_nul_byte_ends_data(row_tokenizer):
    tokenizer = row_tokenizer(b"a,b\0c,d")
    assert [v for _, v in tokenize(tokenizer)] == [b"a", b"b"]
    assert tokenizer.cursor == 3
    assert tokenizer.at_end()


def test_end_limits_scan():
    tokenizer = RowTokenizer(b"a,bcdef", 3)
    assert [t.get_value(tokenizer.buffer) for t in tokenizer] == [b"a", b"b"]
    assert tokenizer.at_end()


def test_reset():
    tokenizer = RowTokenizer(b"a\n", 2)
    list(tokenizer.tokenize_row())
    tokenizer.reset(b"x,y\nz", 5, 4)
    assert [t.get_value(tokenizer.buffer) for t in tokenizer] == [b"z"]
