"""Tests for estimation policies."""

import pytest

from farm_reports.reporting.estimation import (
    FixedEstimationPolicy,
    SeededEstimationPolicy,
    make_policy,
)
from farm_reports.sources.interfaces import FieldRecord


@pytest.fixture
def field_record() -> FieldRecord:
    return FieldRecord(field_id=1, name="North", crop_type="corn", size=10)


class TestFixedEstimationPolicy:
    def test_midpoint_defaults(self, field_record):
        policy = FixedEstimationPolicy()

        assert policy.yield_factor(field_record) == 1.0
        assert policy.productivity_factor(0) == 75.0

    def test_custom_factor(self, field_record):
        policy = FixedEstimationPolicy(factor=0.9, productivity=60)

        assert policy.yield_factor(field_record) == 0.9
        assert policy.productivity_factor(11) == 60

    def test_factor_out_of_range(self):
        with pytest.raises(ValueError):
            FixedEstimationPolicy(factor=1.5)


class TestSeededEstimationPolicy:
    def test_values_within_ranges(self, field_record):
        policy = SeededEstimationPolicy(seed=42)

        for month in range(12):
            assert 0.8 <= policy.yield_factor(field_record) <= 1.2
            assert 50 <= policy.productivity_factor(month) <= 100

    def test_same_seed_same_sequence(self, field_record):
        first = SeededEstimationPolicy(seed=7)
        second = SeededEstimationPolicy(seed=7)

        assert [first.yield_factor(field_record) for _ in range(5)] == [
            second.yield_factor(field_record) for _ in range(5)
        ]


    def test_factor_stable_per_field(self, field_record):
        policy = SeededEstimationPolicy(seed=42)
        other = FieldRecord(field_id=2, name="South", crop_type="wheat", size=20)

        first = policy.yield_factor(field_record)
        policy.yield_factor(other)

        assert policy.yield_factor(field_record) == first
        assert SeededEstimationPolicy(seed=42).yield_factor(field_record) == first

    def test_productivity_stable_per_month(self):
        policy = SeededEstimationPolicy(seed=5)

        assert [policy.productivity_factor(m) for m in range(12)] == [
            policy.productivity_factor(m) for m in range(12)
        ]

    def test_unseeded_policy_is_stable_per_instance(self, field_record):
        policy = SeededEstimationPolicy()

        assert policy.yield_factor(field_record) == policy.yield_factor(field_record)


class TestMakePolicy:
    def test_known_names(self):
        assert isinstance(make_policy("fixed"), FixedEstimationPolicy)
        assert isinstance(make_policy("seeded", seed=1), SeededEstimationPolicy)

    def test_unknown_name(self):
        with pytest.raises(ValueError, match="Unknown estimation policy"):
            make_policy("random-walk")
