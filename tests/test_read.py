import io

import pytest

import csvread

sample = (
    b"First,Last,Address\n"
    b"John,Smith,125 Basic Street\n"
    b'Jane,Doe,"127 5th, Street"\n'
)
sample_rows = [
    (b"John", b"Smith", b"125 Basic Street"),
    (b"Jane", b"Doe", b"127 5th, Street"),
]


@pytest.fixture
def sample_file(tmp_path):
    path = tmp_path / "sample.csv"
    path.write_bytes(sample)
    return path


@pytest.mark.parametrize(
    "options",
    [{}, {"allocate": True}, {"chunk_size": 3}, {"chunk_size": 1}],
)
def test_read_file(sample_file, options):
    assert csvread.read(sample_file, **options) == sample_rows
    assert csvread.read(str(sample_file), **options) == sample_rows


@pytest.mark.parametrize("copy", [True, False])
def test_read_bytes(copy):
    assert csvread.read(sample, copy=copy) == sample_rows


def test_read_stream():
    assert csvread.read(io.BytesIO(sample), chunk_size=5) == sample_rows


def test_read_options():
    assert csvread.read(b" a , b \n", header=False, left_trim=True) == [
        (b"a ", b"b ")
    ]


def test_lazy_read_closes_file(sample_file):
    with csvread.lazy_read(sample_file) as rows:
        assert next(rows) == sample_rows[0]
    with pytest.raises(csvread.NotOpenError):
        next(rows)


def test_errors_derive_from_csv_error():
    with pytest.raises(csvread.CsvError):
        csvread.read(b"a,b\n1,2,3\n")
    with pytest.raises(csvread.MalformedRowError):
        csvread.read(b"a,b\n1\n")


def test_version():
    assert isinstance(csvread.__version__, str)
