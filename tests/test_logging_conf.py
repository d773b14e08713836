from __future__ import annotations

from pathlib import Path

from leadgrid.logging_conf import default_log_dir, tail_log


def test_tail_log_returns_last_lines(tmp_path: Path) -> None:
    path = tmp_path / "leadgrid.log"
    path.write_text("".join(f"line {index}\n" for index in range(10)), encoding="utf-8")
    assert tail_log(path, 3) == ["line 7\n", "line 8\n", "line 9\n"]
    assert tail_log(tmp_path / "missing.log") == []


def test_default_log_dir_follows_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("LEADGRID_HOME", str(tmp_path))
    assert default_log_dir() == tmp_path.resolve() / "logs"
