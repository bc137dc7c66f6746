"""Tests for health scoring."""

import random

import pytest

from services.health import HEALTH_STATUSES, health_stage, health_status, score_health

from conftest import StubRandom, make_features


def test_healthy_features_score_excellent(healthy_features, stub_rng) -> None:
    health = score_health(healthy_features, 'tomato', rng=stub_rng)

    assert health.status == 'Excellent'
    assert health.score == 100
    assert health.confidence == 95


def test_rusty_wheat_scores_critical(rusty_wheat_features, stub_rng) -> None:
    # 50 - 10 (brown) - 45 (yellow) + 10 (lighting) - 20 (wheat rust)
    health = score_health(rusty_wheat_features, 'wheat', rng=stub_rng)

    assert health.status == 'Critical'
    assert health.score == 0
    assert health.confidence == 65


def test_flat_features_score_fifty(stub_rng) -> None:
    health = score_health(make_features(), 'rice', rng=stub_rng)

    assert health.score == 50
    assert health.status == 'Poor'


@pytest.mark.parametrize('brightness, score', [(60, 50), (61, 60), (199, 60), (200, 50)])
def test_lighting_bonus_is_exclusive(brightness, score, stub_rng) -> None:
    features = make_features(avg_brightness=brightness)

    assert score_health(features, 'rice', rng=stub_rng).score == score


def test_green_dominance_needs_both_channels(stub_rng) -> None:
    dominant = make_features(avg_green=120.0, avg_red=100.0, avg_blue=100.0)
    tied = make_features(avg_green=120.0, avg_red=120.0, avg_blue=100.0)

    assert score_health(dominant, 'rice', rng=stub_rng).score == 65
    assert score_health(tied, 'rice', rng=stub_rng).score == 50


@pytest.mark.parametrize(
    'crop, features, score',
    [
        ('wheat', make_features(yellow_ratio=22.0), 0),
        ('corn', make_features(yellow_ratio=22.0), 17),
        ('corn', make_features(yellow_ratio=26.0), 0),
        ('rice', make_features(yellow_ratio=26.0), 11),
        ('tomato', make_features(brown_ratio=16.0), 0),
        ('potato', make_features(brown_ratio=16.0), 18),
    ],
)
def test_crop_specific_penalties(crop, features, score, stub_rng) -> None:
    assert score_health(features, crop, rng=stub_rng).score == score


def test_crop_type_is_case_insensitive(stub_rng) -> None:
    features = make_features(yellow_ratio=22.0)

    assert score_health(features, '  WHEAT ', rng=stub_rng).score == 0


def test_green_ratio_bonus(stub_rng) -> None:
    features = make_features(green_ratio=50.0)

    assert score_health(features, 'rice', rng=stub_rng).score == 80


@pytest.mark.parametrize(
    'score, status',
    [
        (100, 'Excellent'), (85, 'Excellent'), (84.9, 'Good'), (70, 'Good'),
        (55, 'Fair'), (54.9, 'Poor'), (35, 'Poor'), (34.9, 'Critical'), (0, 'Critical'),
    ],
)
def test_status_thresholds(score, status) -> None:
    assert health_status(score) == status


@pytest.mark.parametrize('fraction, confidence', [(0.0, 70), (0.5, 75), (1.0, 80)])
def test_confidence_jitter(fraction, confidence) -> None:
    # 50 + 10 (lighting) + 15 (green dominance) = 75
    features = make_features(avg_brightness=100.0, avg_green=150.0)

    health = score_health(features, 'rice', rng=StubRandom(fraction=fraction))

    assert health.score == 75
    assert health.confidence == confidence


def test_score_and_confidence_are_clamped() -> None:
    rng = random.Random(3)
    for green in (0, 20, 50, 100):
        for brown in (0, 10, 40, 100):
            for yellow in (0, 15, 30, 100):
                features = make_features(
                    green_ratio=float(green),
                    brown_ratio=float(brown),
                    yellow_ratio=float(yellow),
                    avg_brightness=120.0,
                    avg_green=150.0,
                )
                for crop in ('wheat', 'corn', 'tomato', 'potato', 'rice', 'banana'):
                    health = score_health(features, crop, rng=rng)

                    assert 0 <= health.score <= 100
                    assert 65 <= health.confidence <= 95
                    assert health.status in HEALTH_STATUSES


def test_scoring_error_returns_unknown() -> None:
    result = health_stage(None, 'wheat')

    assert result.degraded
    assert result.value.status == 'Unknown'
    assert result.value.score == 50
    assert result.value.confidence == 50
    assert score_health(None, 'wheat').status == 'Unknown'
