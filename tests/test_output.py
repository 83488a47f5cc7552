import csv
from pathlib import Path

from PIL import Image

from binviz.analysis import analyze_stream
from binviz.entropy import compute_entropy
from binviz.frequency import compute_frequency
from binviz.output import (
    BundleWriter,
    entropy_table,
    frequency_table,
    render_text,
    to_image,
    write_frequency_csv,
)
from binviz.pixels import compute_visualization


def test_entropy_table_text() -> None:
    text = render_text(entropy_table(compute_entropy(b"\x00\x01\x00\x01", 2)))
    assert "Dimension" in text
    assert "1.00000 (bits per 1 byte(s))" in text
    assert "0.12500" in text


def test_frequency_table_text() -> None:
    text = render_text(frequency_table(compute_frequency(b"AAB")))
    assert "Relative Frequency" in text
    top = next(line for line in text.splitlines() if "0x41" in line)
    assert "'A'" in top
    assert "0.66667" in top
    assert "'['" in text


def test_frequency_csv(tmp_path: Path) -> None:
    target = tmp_path / "freq.csv"
    write_frequency_csv(compute_frequency(b"\x00\x00\x01"), target)
    with target.open(newline="") as handle:
        rows = list(csv.reader(handle))
    assert rows[0] == ["rank", "byte", "count", "relative"]
    assert len(rows) == 257
    assert rows[1][:3] == ["0", "0", "2"]


def test_images_have_expected_modes() -> None:
    assert to_image(compute_visualization(b"abc", "digraph")).mode == "L"
    trigraph = to_image(compute_visualization(b"abc", "trigraph"))
    assert trigraph.mode == "RGB"
    assert trigraph.size == (256, 256)


def test_bundle_writer_creates_one_folder_per_input(tmp_path: Path) -> None:
    writer = BundleWriter(tmp_path / "out", dashboard=True)
    bundle = analyze_stream(b"hello world" * 100, name="data/sample.bin")
    folder = writer(bundle)

    assert bundle.strip.shape == (3, 512)
    assert bytes(bundle.strip.ravel()[:11]) == b"hello world"
    assert not bundle.strip.ravel()[1100:].any()

    assert folder == tmp_path / "out" / "sample"
    for name in (
        "entropy.txt",
        "entropy.csv",
        "most_frequent.txt",
        "most_frequent.csv",
        "digraph.png",
        "trigraph.png",
        "dashboard.png",
    ):
        assert (folder / name).is_file(), name
    with Image.open(folder / "digraph.png") as image:
        assert image.size == (256, 256)
        assert image.mode == "L"
    assert writer.folder(0) == folder
    with Image.open(folder / "dashboard.png") as image:
        assert image.size == (1200, 1200)


def test_bundle_writer_disambiguates_repeated_stems(tmp_path: Path) -> None:
    writer = BundleWriter(tmp_path)
    first = writer(analyze_stream(b"abc", name="one/a.bin", index=0))
    second = writer(analyze_stream(b"abc", name="two/a.bin", index=1))
    third = writer(analyze_stream(b"abc", name="<stream 2>", index=2))
    assert first.name == "a"
    assert second.name == "a-1"
    assert third.name == "stream-2"
    assert not (first / "dashboard.png").exists()
