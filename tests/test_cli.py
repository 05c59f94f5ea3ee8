from __future__ import annotations

from pathlib import Path

import pytest

from segment_profit.cli import build_parser, main


@pytest.fixture(autouse=True)
def _log_to_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SEGMENT_LOG_PATH", str(tmp_path / "logs" / "cli.log"))
    monkeypatch.delenv("SEGMENT_SCORING_MODE", raising=False)


def test_parser_requires_subcommand() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_generate_then_summarize(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    out = tmp_path / "records.csv"
    main(["generate", "--n", "25", "--seed", "9", "--out", str(out)])
    assert out.exists()

    main(["summarize", str(out)])
    printed = capsys.readouterr().out
    assert "The average profitability score is" in printed
    assert "Top 5 most profitable customers:" in printed


def test_aggregate_prints_one_line_per_group(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    csv_path = tmp_path / "small.csv"
    csv_path.write_text(
        "id,industry,monthlyPremium,employerContribution\n"
        "1,Tech,100,50\n"
        "2,Retail,100,20\n"
        "3,Tech,100,30\n",
        encoding="utf-8",
    )
    main(["aggregate", str(csv_path), "--key", "industry", "--mode", "simple"])
    lines = [ln for ln in capsys.readouterr().out.splitlines() if "\t" in ln]
    assert lines == ["Tech\t60.00%\t2", "Retail\t80.00%\t1"]


def test_bad_upload_exits_with_error(tmp_path: Path) -> None:
    bad = tmp_path / "data.json"
    bad.write_text("{}", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["summarize", str(bad)])
    assert exc.value.code == 1
