from redlight.services.game import DIFFICULTY, difficulty_for, round_label


def test_round_one_profile():
    first = difficulty_for(1)
    assert first.grace_period_ms == 1000
    assert (first.green_duration.min, first.green_duration.max) == (3000, 5500)
    assert (first.red_duration.min, first.red_duration.max) == (2000, 3500)
    assert first.progress_rate == 1.2


def test_rounds_are_clamped_to_the_table():
    assert difficulty_for(0) is DIFFICULTY[0]
    assert difficulty_for(5) is DIFFICULTY[-1]
    assert difficulty_for(42) is DIFFICULTY[-1]


def test_later_rounds_are_harder():
    graces = [p.grace_period_ms for p in DIFFICULTY]
    rates = [p.progress_rate for p in DIFFICULTY]
    assert graces == sorted(graces, reverse=True)
    assert rates == sorted(rates, reverse=True)


def test_round_labels():
    assert round_label(0) == 'WARM-UP'
    assert round_label(1) == 'WARM-UP'
    assert round_label(3) == 'SERIOUS'
    assert round_label(9) == 'MAXIMUM'


def test_profile_serialization():
    assert difficulty_for(2).to_dict() == {
        'gracePeriodMs': 850,
        'greenDuration': {'min': 2500, 'max': 5000},
        'redDuration': {'min': 1800, 'max': 3200},
        'progressRate': 1.1,
    }
