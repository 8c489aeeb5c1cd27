import io

import pytest

from asciigrid.cli import main
from tests.conftest import halves


def test_converts_to_console(write_image, capsys):
    path = write_image(halves(8, 4))
    assert main([str(path), "-c", ".@", "-r", "2"]) == 0
    assert capsys.readouterr().out == ".@\n"


def test_round_option(write_image, capsys):
    path = write_image(size=(2, 2), colour=(140, 140, 140))
    # Default rounding would pick "@" for this gray
    assert main([str(path), "-c", ".@", "-r", "1", "--round", "down"]) == 0
    assert capsys.readouterr().out == ".\n"


def test_html_output(write_image, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = write_image(halves(8, 4), name="cat.png")
    assert main([str(path), "-c", ".@", "-o", "html"]) == 0
    assert "<pre>.@</pre>" in (tmp_path / "cat.html").read_text(encoding="utf-8")


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.png")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / "broken.png"
    path.write_bytes(b"nope")
    assert main([str(path)]) == 1
    assert "Cannot decode" in capsys.readouterr().err


def test_bad_resolution_is_usage_error(write_image, capsys):
    path = write_image(size=(4, 4))
    with pytest.raises(SystemExit) as info:
        main([str(path), "-r", "3"])
    assert info.value.code == 2
    assert "power of two" in capsys.readouterr().err


def test_small_charset_is_usage_error(write_image):
    path = write_image(size=(4, 4))
    with pytest.raises(SystemExit) as info:
        main([str(path), "-c", "@@"])
    assert info.value.code == 2


def test_interactive_session(write_image, monkeypatch, capsys):
    path = write_image(halves(8, 4))
    monkeypatch.setattr("sys.stdin", io.StringIO("round up\nres\nexit\n"))
    assert main([str(path), "-i", "-c", ".@"]) == 0
    assert "Resolution set to 2." in capsys.readouterr().out


def test_oversized_image(write_image, monkeypatch, capsys):
    from PIL import Image

    path = write_image(size=(64, 64))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    assert main([str(path)]) == 1
    assert "Cannot decode" in capsys.readouterr().err
