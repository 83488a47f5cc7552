import numpy as np
import pytest

from binviz.errors import ConfigurationError
from binviz.layout import LAYOUTS, arrange, get_layout


@pytest.mark.parametrize("name", sorted(LAYOUTS))
def test_layout_is_a_bijection(name: str) -> None:
    layout = get_layout(name)
    a, b = np.divmod(np.arange(65536, dtype=np.int64), 256)
    x, y = layout.to_point(a, b)
    assert x.min() >= 0 and x.max() <= 255
    assert y.min() >= 0 and y.max() <= 255
    assert np.unique(y * 256 + x).size == 65536
    back_a, back_b = layout.to_pair(x, y)
    assert np.array_equal(back_a, a)
    assert np.array_equal(back_b, b)


def test_zorder_interleaves_bits() -> None:
    zorder = get_layout("zorder")
    assert zorder.to_point(0, 0) == (0, 0)
    assert zorder.to_point(0, 1) == (1, 0)
    assert zorder.to_point(0, 2) == (0, 1)
    assert zorder.to_point(0, 3) == (1, 1)
    assert zorder.to_point(0xFF, 0xFF) == (255, 255)
    assert zorder.to_pair(1, 1) == (0, 3)


def test_direct_layout_uses_bytes_as_coordinates() -> None:
    assert get_layout("direct").to_point(12, 200) == (12, 200)


def test_unknown_layout() -> None:
    with pytest.raises(ConfigurationError):
        get_layout("spiral")


def test_arrange_moves_cells_with_their_bands() -> None:
    matrix = np.zeros((256, 256, 3), dtype=np.int64)
    matrix[3, 7] = [1, 2, 3]
    canvas = arrange(matrix, get_layout("direct"))
    assert canvas[7, 3].tolist() == [1, 2, 3]
    assert canvas.sum() == 6

    canvas = arrange(matrix, get_layout("zorder"))
    x, y = get_layout("zorder").to_point(3, 7)
    assert canvas[y, x].tolist() == [1, 2, 3]


def test_arrange_rejects_wrong_shape() -> None:
    with pytest.raises(ValueError):
        arrange(np.zeros((16, 16)), get_layout("direct"))
