from importlib.metadata import PackageNotFoundError, version

try:
    version = version("CsvRead")
except PackageNotFoundError:
    version = "0.0.0"
