"""CLI against the in-memory backend."""

import pytest

from rota.cli import main


def test_show_prints_both_shifts(capsys):
    main(["--backend", "memory", "show", "--days", "2"])
    out = capsys.readouterr().out
    assert out.count("8am-5pm") == 2
    assert out.count("5pm-9pm") == 2
    assert out.startswith("[INFO] Subscribed")


def test_set_time_cascades(capsys):
    main(["--backend", "memory", "set-time", "--date", "2024-01-01", "--shift", "morning",
          "--start", "09:00", "--end", "18:00"])
    out = capsys.readouterr().out
    assert "evening start set to 18:00" in out
    assert "[OK] 2024-01-01 morning: 09:00-18:00" in out


def test_set_name_and_clear(capsys):
    main(["--backend", "memory", "set-name", "--date", "2024-01-01", "--shift", "evening", " Sam "])
    main(["--backend", "memory", "clear", "--date", "2024-01-01", "--shift", "evening", "--field", "name"])
    out = capsys.readouterr().out
    assert "[OK] 2024-01-01 evening: name = 'Sam'" in out
    assert "[OK] 2024-01-01 evening: name cleared" in out


def test_rejects_bad_time(capsys):
    with pytest.raises(ValueError):
        main(["--backend", "memory", "set-time", "--date", "2024-01-01", "--shift", "evening",
              "--start", "7pm", "--end", "22:00"])
    assert "[ERROR] Update failed" in capsys.readouterr().out


def test_export(tmp_path, capsys):
    out = tmp_path / "rota.csv"
    main(["--backend", "memory", "export", "--out", str(out), "--days", "3"])
    assert out.exists()
    assert "[OK] Exported 6 shifts" in capsys.readouterr().out
