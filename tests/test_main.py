"""CLI tests for the RUT checker entry point."""

from __future__ import annotations

import pytest

from main import main


class TestRutCheckerCli:
    def test_all_valid_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["76.543.210-3", "12.345.678-5"]) == 0
        out = capsys.readouterr().out
        assert "765432103" in out
        assert "VALID" in out
        assert "INVALID" not in out

    def test_any_invalid_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["76.543.210-3", "76.543.210-5"]) == 1
        out = capsys.readouterr().out
        assert "INVALID" in out
        assert "expected" in out

    def test_malformed_rut_has_no_expected_char(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main(["AB-3"]) == 1
        assert "expected" not in capsys.readouterr().out

    def test_requires_an_argument(self) -> None:
        with pytest.raises(SystemExit):
            main([])
