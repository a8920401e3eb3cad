import functools
from pathlib import Path


@functools.cache
def get_testdata_dir() -> Path:
    return (Path(__file__).parent / "testdata").resolve()
