"""Tests for the MDAD command-line demo."""

import json

import sys, os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mdad.demo import main, run_demo
from mdad.mdad_datasets import SignalCSVAdapter, SyntheticSignalGenerator


class TestDemo:

    def test_synthetic_run(self, capsys):
        assert main(["--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Synthetic batch" in out
        assert "Alert feed" in out

    def test_invalid_radius_exit_code(self, capsys):
        assert main(["--radius", "0"]) == 2
        assert "error:" in capsys.readouterr().err

    def test_invalid_threshold_exit_code(self):
        assert main(["--threshold", "150"]) == 2

    def test_report_written(self, tmp_path):
        assert main(["--seed", "3", "--report", str(tmp_path)]) == 0
        files = [f for f in os.listdir(tmp_path) if f.startswith("mdad-report-")]
        assert len(files) == 1
        with open(tmp_path / files[0], encoding="utf-8") as f:
            report = json.load(f)
        assert set(report) == {"exportedAt", "metrics", "threats", "signals"}

    def test_csv_input(self, tmp_path, capsys):
        path = str(tmp_path / "feed.csv")
        SignalCSVAdapter.save(SyntheticSignalGenerator(seed=2).clustered(), path)
        result = run_demo(input_path=path)
        assert "Loaded" in capsys.readouterr().out
        assert result.total_signals > 0

    def test_bad_csv_exit_code(self, tmp_path):
        path = tmp_path / "feed.csv"
        path.write_text("id,timestamp\nS1,2024-03-01\n")
        assert main(["--input", str(path)]) == 2
