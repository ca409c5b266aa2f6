"""
Tests for the command line entry point.

Run with: pytest tests/test_main.py
"""

from castbridge import main


def test_missing_file_exits_with_error(tmp_path):
    assert main.run_bridge([str(tmp_path / "missing.mp3")]) == 1


def test_serves_until_interrupted(monkeypatch, capsys, audio_file):
    def interrupt(_seconds):
        raise KeyboardInterrupt

    monkeypatch.setattr(main.time, "sleep", interrupt)

    code = main.run_bridge([
        str(audio_file),
        "--artwork", str(audio_file),
        "--host", "127.0.0.1",
        "--advertise-host", "127.0.0.1",
    ])

    out = capsys.readouterr().out
    assert code == 0
    assert "track.mp3: http://127.0.0.1:" in out
    assert "/audio/" in out
    assert "artwork: http://127.0.0.1:" in out
    assert "Stopping server..." in out
