from __future__ import annotations

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from linaccel.gui.application import main


def test_gui_exits_cleanly_on_invalid_config(tmp_path, caplog) -> None:
    config_path = tmp_path / "config.yaml"
    config_path.write_text("- not\n- a mapping\n", encoding="utf-8")
    prefs_path = tmp_path / "prefs.yaml"

    with pytest.raises(SystemExit) as excinfo:
        main(["linaccel-gui", "--config", str(config_path), "--prefs", str(prefs_path)])

    assert excinfo.value.code == 2
    assert any("Invalid configuration" in r.getMessage() for r in caplog.records)
    assert not prefs_path.exists()
