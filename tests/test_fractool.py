"""Tests for the fractool command line entry point."""

import json

import numpy as np
import pytest

from fractool import main, run


class TestRun:
    @pytest.mark.parametrize(
        "args, expected",
        [
            (("simplest", "0.1"), "1/10"),
            (("simplest", "0.1", "half"), "1/10"),
            (("exact", "0.1", "single"), "13421773/134217728"),
            (("exact", "0.5"), "1/2"),
            (("cf", "415/93"), "[4; 2, 6, 7]"),
            (("repeating", "7/12"), "0.58(3)"),
            (("mixed", "8/5"), "1 3/5"),
            (("mixed", "-13/5"), "-2 3/5"),
            (("decimal", "1/3"), "0." + "3" * 20),
            (("float", "1/3"), "0.3333333333333333"),
        ],
    )
    def test_commands(self, args, expected) -> None:
        assert run(*args) == expected

    def test_npy(self, tmp_path) -> None:
        path = tmp_path / "a.npy"
        np.save(path, np.array([0.5, -0.25], dtype=np.float32))
        assert json.loads(run("npy", str(path))) == ["1/2", "-1/4"]


class TestMain:
    def test_prints_result(self, capsys) -> None:
        main(["cf", "415/93"])
        assert capsys.readouterr().out.strip() == "[4; 2, 6, 7]"

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["cf"],
            ["bogus", "1/2"],
            ["cf", "1/2", "double", "extra"],
        ],
    )
    def test_usage(self, capsys, argv) -> None:
        with pytest.raises(SystemExit) as e:
            main(argv)
        assert e.value.code == 1
        assert "Usage" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "argv",
        [
            ["cf", "inf"],
            ["cf", "abc"],
            ["exact", "0.1", "float128"],
            ["npy", "/nonexistent/values.npy"],
        ],
    )
    def test_errors(self, capsys, argv) -> None:
        with pytest.raises(SystemExit) as e:
            main(argv)
        assert e.value.code == 1
        assert capsys.readouterr().out.startswith("Error")
