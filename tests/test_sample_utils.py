import numpy as np

from tempo_utils.sample_utils import to_float, to_int


def test_to_float_scales_by_32768():
    out = to_float(np.array([0, 16384, -32768, 32767], dtype=np.int16))
    assert out.dtype == np.float32
    np.testing.assert_allclose(out, [0.0, 0.5, -1.0, 32767 / 32768.0])


def test_round_trip_is_within_one_step():
    all_values = np.arange(-32768, 32768, dtype=np.int32).astype(np.int16)
    back = to_int(to_float(all_values))
    diff = np.abs(back.astype(np.int32) - all_values.astype(np.int32))
    assert back.shape == all_values.shape
    assert diff.max() <= 1


def test_to_int_clamps_instead_of_wrapping():
    out = to_int(np.array([1.0, 1.5, 1e9, np.inf, -1.5, -2.0, -1e9, -np.inf], dtype=np.float32))
    assert out.dtype == np.int16
    assert out.tolist() == [32767, 32767, 32767, 32767, -32768, -32768, -32768, -32768]


def test_to_int_rounds_to_nearest():
    step = 1.0 / 32767.0
    out = to_int(np.array([0.0, 0.4 * step, 0.6 * step, -0.6 * step], dtype=np.float64))
    assert out.tolist() == [0, 0, 1, -1]


def test_conversions_preserve_length_of_empty_buffers():
    assert to_float(np.zeros(0, dtype=np.int16)).shape == (0,)
    assert to_int(np.zeros(0, dtype=np.float32)).shape == (0,)


def test_exactly_minus_one_maps_to_minus_32767():
    # 32767 scale is symmetric, so only values past -1.0 reach -32768
    assert to_int(np.array([-1.0, -1.0 - 1.0 / 32767.0])).tolist() == [-32767, -32768]


def test_nan_maps_to_zero():
    out = to_int(np.array([np.nan, 0.5, np.nan], dtype=np.float32))
    assert out.tolist() == [0, 16384, 0]
