import pytest

from core.normalize import axis_value, normalize, throttle_remap, throttle_value, to_raw


def test_normalize_extremes_are_exact():
    assert normalize(32767) == 1.0
    assert normalize(-32768) == -1.0
    assert normalize(0) == 0.0


def test_normalize_stays_in_range():
    for v in range(-32768, 32768, 97):
        assert -1.0 <= normalize(v) <= 1.0


def test_normalize_half_scale():
    assert normalize(-16384) == -0.5
    assert pytest.approx(normalize(16383), abs=1e-4) == 0.5


def test_throttle_remap_bounds_and_monotonic():
    prev = -1.0
    for v in list(range(-32768, 32768, 61)) + [32767]:
        m = throttle_remap(v)
        assert 0.0 <= m <= 1.0
        assert m >= prev
        prev = m
    assert throttle_remap(-32768) == 0.0
    assert throttle_remap(32767) == 1.0


def test_out_of_range_axis_is_neutral():
    sample = [100, -100]
    assert axis_value(sample, 5) == 0.0
    assert axis_value(sample, -1) == 0.0
    assert axis_value([], 0) == 0.0
    # neutral stick position remaps to mid throttle
    assert throttle_value(sample, 7) == 0.5


def test_throttle_value_goes_through_remap(monkeypatch):
    from core import normalize as normalize_mod

    calls = []

    def recording_remap(raw):
        calls.append(raw)
        return 0.25

    monkeypatch.setattr(normalize_mod, "throttle_remap", recording_remap)
    assert normalize_mod.throttle_value([0, 0, 1234], 2) == 0.25
    assert normalize_mod.throttle_value([0], 9) == 0.25
    assert calls == [1234, 0]


def test_throttle_value_matches_remap():
    sample = [-32768, -16384, 0, 16383, 32767]
    for i, raw in enumerate(sample):
        assert throttle_value(sample, i) == throttle_remap(raw)


def test_to_raw_clamps_pygame_floats():
    assert to_raw(1.0) == 32767
    assert to_raw(-1.0) == -32768
    assert to_raw(0.0) == 0
    assert to_raw(-0.5) == -16384
