import csv
from pathlib import Path

from PIL import Image

from binviz.cli import main


def test_entropy_command(write_file, capsys) -> None:
    target = write_file("alt.bin", b"\x00\x01\x00\x01")
    assert main(["entropy", "-f", str(target), "-c", "2"]) == 0
    out = capsys.readouterr().out
    assert "Dimension" in out
    assert "1.00000" in out


def test_frequency_command(write_file, capsys) -> None:
    target = write_file("zeros.bin", b"\x00\x00\x00")
    assert main(["frequency", "--file", str(target)]) == 0
    assert "0x00" in capsys.readouterr().out


def test_visualize_command_writes_png(write_file, tmp_path: Path) -> None:
    target = write_file("data.bin", bytes(range(256)) * 4)
    digraph = tmp_path / "digraph.png"
    trigraph = tmp_path / "trigraph.png"

    assert main(["visualize", "-f", str(target), "-o", str(digraph)]) == 0
    assert main(["visualize", "-f", str(target), "--trigraph", "-o", str(trigraph), "--scale", "sqrt"]) == 0

    with Image.open(digraph) as image:
        assert image.mode == "L"
    with Image.open(trigraph) as image:
        assert image.mode == "RGB"


def test_full_command_reports_partial_failure(write_file, tmp_path: Path, capsys) -> None:
    good = write_file("good.bin", b"hello world")
    missing = tmp_path / "missing.bin"
    out_dir = tmp_path / "out"

    status = main(["full", "-f", str(good), str(missing), "-o", str(out_dir), "-c", "3"])

    assert status == 1
    assert (out_dir / "good" / "entropy.txt").is_file()
    assert (out_dir / "good" / "trigraph.png").is_file()
    assert not (out_dir / "missing").exists()
    assert "failed" in capsys.readouterr().out


def test_missing_file_is_an_error(tmp_path: Path, capsys) -> None:
    assert main(["entropy", "-f", str(tmp_path / "nope.bin"), "-c", "1"]) == 1
    assert "Error" in capsys.readouterr().err


def test_zero_order_is_an_error(write_file, capsys) -> None:
    target = write_file("a.bin", b"abc")
    assert main(["entropy", "-f", str(target), "-c", "0"]) == 1
    assert "order" in capsys.readouterr().err


def test_unwritable_output_is_an_error(write_file, tmp_path: Path, capsys) -> None:
    target = write_file("data.bin", b"abc")
    output = tmp_path / "missing" / "out.png"
    assert main(["visualize", "-f", str(target), "-o", str(output)]) == 1
    assert "Error" in capsys.readouterr().err
    assert not output.exists()


def test_command_line_flags_win_over_environment(write_file, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BINVIZ_MAX_ORDER", "5")
    monkeypatch.setenv("BINVIZ_SCALE", "not-a-scale")
    target = write_file("data.bin", b"hello world")
    out_dir = tmp_path / "out"

    assert main(["full", "-f", str(target), "-o", str(out_dir), "-c", "3", "--scale", "sqrt"]) == 0

    with (out_dir / "data" / "entropy.csv").open(newline="") as handle:
        rows = list(csv.reader(handle))
    assert len(rows) == 1 + 3


def test_environment_fills_in_unset_flags(write_file, tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("BINVIZ_MAX_ORDER", "4")
    target = write_file("data.bin", b"hello world")
    out_dir = tmp_path / "out"

    assert main(["full", "-f", str(target), "-o", str(out_dir)]) == 0

    with (out_dir / "data" / "entropy.csv").open(newline="") as handle:
        rows = list(csv.reader(handle))
    assert len(rows) == 1 + 4
