import gzip
from pathlib import Path
from typing import Callable

import pytest

IRIS = """% iris excerpt
@relation iris

@attribute sepallength numeric
@attribute sepalwidth numeric
@attribute petallength numeric
@attribute petalwidth numeric
@attribute class {setosa,versicolor,virginica}

@data
5.1,3.5,1.4,0.2,setosa
4.9,3.0,1.4,0.2,setosa
7.0,3.2,4.7,1.4,versicolor
6.4,3.2,4.5,1.5,versicolor
6.3,3.3,6.0,2.5,virginica
5.8,2.7,5.1,1.9,virginica
"""

MIXED = """@relation 'mixed data'
@attribute id numeric
@attribute name string
@attribute when date "yyyy-MM-dd"
@attribute colour {red,green}
@attribute tmp_a real
@attribute tmp_b integer
@data
1,'alice',2020-01-02,red,0.5,3
2,'bob',2020-01-03,green,?,4
"""


@pytest.fixture
def write_arff(tmp_path: Path) -> Callable[..., Path]:
    """Write ARFF text to a temporary file (gzipped if the name ends in .gz)."""

    def _write(text: str, name: str = "data.arff") -> Path:
        path = tmp_path / name
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as handle:
                handle.write(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def iris_file(write_arff) -> Path:
    return write_arff(IRIS, "iris.arff")


@pytest.fixture
def mixed_file(write_arff) -> Path:
    return write_arff(MIXED, "mixed.arff")


@pytest.fixture
def abc_file(write_arff) -> Path:
    return write_arff("@relation abc\n@attribute a numeric\n@attribute b numeric\n@attribute c numeric\n@data\n1,2,3\n", "abc.arff")


@pytest.fixture
def truncated_gz_file(tmp_path: Path) -> Path:
    """Gzipped IRIS cut off partway through the compressed stream."""

    payload = gzip.compress(IRIS.encode("utf-8"))
    path = tmp_path / "cut.arff.gz"
    path.write_bytes(payload[: len(payload) // 3])
    return path
