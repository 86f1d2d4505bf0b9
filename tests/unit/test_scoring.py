import pytest

from dustwatch.common.scoring import MAX_SCORE, clamp, clamp01, normalise_components, risk_score, round_half_up


@pytest.mark.parametrize(
    "wind,pm10,dust,rh",
    [
        (0, 0, 0, 100),
        (-50, -10, -1, 250),
        (1e6, 1e6, 1e6, -500),
        (15, 75, 100, 50),
        (None, None, None, None),
    ],
)
def test_normalised_components_stay_in_unit_interval(wind, pm10, dust, rh):
    parts = normalise_components(wind, pm10, dust, rh)
    assert set(parts) == {"wind", "pm10", "dust", "dryness"}
    assert all(0.0 <= value <= 1.0 for value in parts.values())


def test_score_range_bounds():
    assert risk_score(wind=0, pm10=0, dust=0, rh=100) == 0.0
    assert risk_score(wind=100, pm10=500, dust=900, rh=0) == pytest.approx(3.6)
    assert MAX_SCORE == pytest.approx(3.6)
    assert 0.0 <= risk_score(wind=-3, pm10=-3, dust=-3, rh=400) <= 3.6


def test_absent_inputs_use_neutral_defaults():
    assert risk_score(wind=None, pm10=None, dust=None, rh=None) == risk_score(wind=0, pm10=0, dust=0, rh=50)
    # Missing humidity is half-dry, not bone-dry and not saturated.
    assert risk_score() == pytest.approx(0.3)


def test_weights_favour_particulates():
    assert risk_score(pm10=150, rh=100) == pytest.approx(1.1)
    assert risk_score(dust=200, rh=100) == pytest.approx(1.1)
    assert risk_score(wind=30, rh=100) == pytest.approx(0.8)
    assert risk_score(rh=0) == pytest.approx(0.6)


def test_clamp_within_bounds():
    assert clamp(-5, minimum=0, maximum=100) == 0
    assert clamp(50, minimum=0, maximum=100) == 50
    assert clamp(150, minimum=0, maximum=100) == 100
    assert clamp01(1.7) == 1.0


def test_round_half_up_breaks_ties_upwards():
    assert round_half_up(0.5) == 1
    assert round_half_up(1.5) == 2
    assert round_half_up(2.5) == 3
    assert round_half_up(4.5) == 5
    assert round_half_up(1.234, 2) == pytest.approx(1.23)


@pytest.mark.parametrize("value", [0.0, 0.004, 0.005, 1.23456, 2.999, 3.6, 1.0 / 3, 2.675])
def test_rounding_to_two_decimals_stays_within_half_a_cent(value):
    assert abs(round_half_up(value, 2) - value) <= 0.005 + 1e-9
