import pytest

from vcxengine.formats import D24S8, D32, R8, R16, RGB8, RGBA8, cast_rgba_to_rgb


def test_r8_extremes():
    assert R8.encode(1.0) == 255
    assert R8.encode(0.0) == 0


def test_r8_clamps_out_of_range():
    assert R8.encode(-3.0) == R8.encode(0.0)
    assert R8.encode(7.5) == R8.encode(1.0)


def test_r8_rounds_half_away_from_zero():
    assert R8.encode(0.5) == 128


@pytest.mark.parametrize("fmt", [R8, R16, D32])
@pytest.mark.parametrize("x", [0.0, 0.1, 0.25, 0.7, 1.0])
def test_scalar_round_trip(fmt, x):
    assert fmt.decode(fmt.encode(x)) == pytest.approx(x, abs=1.0 / fmt.max_value)


@pytest.mark.parametrize("raw", [0, 1, 17, 128, 255])
def test_r8_decode_encode_identity(raw):
    assert R8.encode(R8.decode(raw)) == raw


def test_r16_max():
    assert R16.encode(1.0) == 65535


def test_rgb8_round_trip():
    encoded = RGB8.encode((0.2, 0.4, 0.9))
    assert len(encoded) == 3
    assert RGB8.decode(encoded) == pytest.approx((0.2, 0.4, 0.9), abs=1 / 255)


def test_rgba8_clamps_each_channel():
    assert RGBA8.encode((-1.0, 2.0, 0.0, 1.0)) == (0, 255, 0, 255)


def test_wrong_channel_count():
    with pytest.raises(ValueError):
        RGB8.encode((0.1, 0.2, 0.3, 0.4))
    with pytest.raises(ValueError):
        RGBA8.decode((1, 2, 3))


def test_depth_stencil_round_trip():
    packed = D24S8.encode((0.5, 7))
    depth, stencil = D24S8.decode(packed)
    assert stencil == 7
    assert depth == pytest.approx(0.5, abs=1 / 16777215)


def test_depth_stencil_full_depth_mask():
    assert D24S8.encode((1.0, 0)) == 0x00FFFFFF


def test_cast_rgba_to_rgb():
    assert cast_rgba_to_rgb((10, 20, 30, 40)) == (10, 20, 30)
    with pytest.raises(ValueError):
        cast_rgba_to_rgb((1, 2, 3))