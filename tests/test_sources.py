"""Tests for source resolution and opening."""

import pytest

from arffset.data.sources import is_gzipped, open_source, resolve_source
from arffset.errors import ConfigurationError

from .conftest import IRIS


class TestResolveSource:
    def test_relative_path_becomes_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert resolve_source("data.arff") == str((tmp_path / "data.arff").resolve())

    def test_urls_are_kept(self):
        assert resolve_source("https://example.com/iris.arff") == "https://example.com/iris.arff"

    @pytest.mark.parametrize("location", ["", "mailto://x", "https://"])
    def test_invalid(self, location):
        with pytest.raises(ConfigurationError):
            resolve_source(location)

    def test_gzip_detection(self):
        assert is_gzipped("/tmp/iris.arff.gz")
        assert is_gzipped("https://example.com/iris.arff.gz")
        assert not is_gzipped("/tmp/iris.arff")


class TestOpenSource:
    def test_plain_file(self, iris_file):
        with open_source(iris_file) as stream:
            assert stream.readline().startswith("% iris")

    def test_gzip_file(self, write_arff):
        path = write_arff(IRIS, "iris.arff.gz")
        with open_source(path) as stream:
            assert stream.read() == IRIS

    def test_file_url(self, iris_file):
        with open_source(iris_file.resolve().as_uri()) as stream:
            assert "@relation iris" in stream.read()

    def test_stream_closed_after_error(self, iris_file):
        with pytest.raises(RuntimeError):
            with open_source(iris_file) as stream:
                raise RuntimeError("boom")
        assert stream.closed
