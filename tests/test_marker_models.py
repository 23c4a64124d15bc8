import pytest

from markers.models import (
    Bounded,
    Marker,
    UNBOUNDED,
    Unbounded,
    coerce_lifespan,
    is_expired,
)
from markers.policy import MarkerPolicy, default_marker_policy

T0 = 1_700_000_000_000


@pytest.mark.parametrize("duration_ms", [1, 1000, 5 * 60 * 1000, 120 * 60 * 1000])
def test_bounded_expiry_boundary(duration_ms):
    marker = Marker("m1", 10.0, 20.0, T0, Bounded(duration_ms))

    assert is_expired(marker, T0 + duration_ms - 1) is False
    assert is_expired(marker, T0 + duration_ms) is True


@pytest.mark.parametrize("elapsed_ms", [0, 1, 10**6, 10**15])
def test_unbounded_never_expires(elapsed_ms):
    marker = Marker("m1", 10.0, 20.0, T0, UNBOUNDED)

    assert is_expired(marker, T0 + elapsed_ms) is False
    assert marker.expires_at_ms() is None
    assert marker.remaining_ms(T0 + elapsed_ms) is None


def test_bounded_rejects_non_positive_duration():
    with pytest.raises(ValueError):
        Bounded(0)
    with pytest.raises(ValueError):
        Bounded(-5)


def test_unbounded_record_round_trip():
    marker = Marker("m1", 10.0, 20.0, T0, UNBOUNDED)
    record = marker.to_record()

    assert record["lifespanMs"] is None
    restored = Marker.from_record(record)
    assert isinstance(restored.lifespan, Unbounded)
    assert restored == marker


def test_coerce_lifespan():
    assert coerce_lifespan(None) == UNBOUNDED
    assert coerce_lifespan(60000) == Bounded(60000)
    assert coerce_lifespan(Bounded(5)) == Bounded(5)
    with pytest.raises(TypeError):
        coerce_lifespan("forever")


def test_new_marker_gets_unique_ids():
    a = Marker.new((1.0, 2.0), UNBOUNDED, now_ms=T0)
    b = Marker.new((1.0, 2.0), UNBOUNDED, now_ms=T0)

    assert a.id != b.id
    assert a.location == (1.0, 2.0)


def test_policy_slider_mapping():
    policy = default_marker_policy()

    assert policy.lifespan_from_fraction(0.0) == Bounded(5 * 60 * 1000)
    assert policy.lifespan_from_fraction(1.0) == Bounded(120 * 60 * 1000)
    # (60 - 5) / (120 - 5) ~= 0.48 lands on 60 minutes
    assert policy.lifespan_from_fraction(0.48) == Bounded(60 * 60 * 1000)
    assert policy.default_lifespan() == Bounded(60 * 60 * 1000)


def test_policy_rejects_out_of_range_minutes():
    policy = default_marker_policy()

    with pytest.raises(ValueError):
        policy.lifespan_for_minutes(4)
    with pytest.raises(ValueError):
        policy.lifespan_for_minutes(121)
    with pytest.raises(ValueError):
        policy.lifespan_from_fraction(1.5)


def test_policy_validate():
    with pytest.raises(ValueError):
        MarkerPolicy(min_lifespan_minutes=0).validate()
    with pytest.raises(ValueError):
        MarkerPolicy(min_lifespan_minutes=30, max_lifespan_minutes=10).validate()
    with pytest.raises(ValueError):
        MarkerPolicy(default_lifespan_minutes=500).validate()


@pytest.mark.parametrize("field, value", [
    ("lifespanMs", float("inf")),
    ("createdAt", float("inf")),
    ("latitude", float("nan")),
    ("longitude", float("-inf")),
])
def test_from_record_rejects_non_finite_numbers(field, value):
    record = Marker("m1", 10.0, 20.0, T0, Bounded(1000)).to_record()
    record[field] = value

    with pytest.raises(ValueError):
        Marker.from_record(record)
