"""Tests for stat merging."""

import pytest

from wandcraft import settings as config
from wandcraft.stats import Stats, no_stats, merge_stats, merge_stats_mut, resolve_stats
from wandcraft.wand import WandConfigError


class TestMergeStats:
    """Per-field combination rules."""

    def test_identity(self):
        stats = Stats(damage=4, speed=1.5, lifetime=(10, 20))

        assert merge_stats(stats, no_stats()) == stats
        assert merge_stats(no_stats(), stats) == stats

    def test_additive_fields(self):
        merged = merge_stats(
            Stats(damage=3, speed=1.0, spread=0.1, bounces=1),
            Stats(damage=4, speed=0.5, spread=-0.05, bounces=2),
        )

        assert merged.damage == 7
        assert merged.speed == 1.5
        assert merged.spread == pytest.approx(0.05)
        assert merged.bounces == 3

    def test_absent_field_keeps_other_side(self):
        merged = merge_stats(Stats(damage=3), Stats(speed=2.0))

        assert merged.damage == 3
        assert merged.speed == 2.0
        assert merged.lifetime is None

    def test_additive_order_does_not_matter(self):
        a, b, c = Stats(damage=1), Stats(damage=10), Stats(damage=100)

        assert merge_stats(merge_stats(a, b), c) == merge_stats(merge_stats(c, a), b)

    def test_lifetime_range_add(self):
        merged = merge_stats(Stats(lifetime=(10, 20)), Stats(lifetime=(5, 8)))

        assert merged.lifetime == (15, 28)

    def test_infinite_lifetime_absorbs(self):
        merged = merge_stats(Stats(lifetime=(-1, -1)), Stats(lifetime=(20, 40)))
        assert merged.lifetime == (-1, -1)

        merged = merge_stats(Stats(lifetime=(20, 40)), Stats(lifetime=(-1, -1)))
        assert merged.lifetime == (-1, -1)

    def test_override_rule_last_writer_wins(self, monkeypatch):
        monkeypatch.setitem(config.STAT_MERGE_RULES, 'speed', 'override')

        acc = no_stats()
        for step in (Stats(speed=1.0), Stats(speed=3.0), Stats(damage=1)):
            merge_stats_mut(acc, acc, step)

        assert acc.speed == 3.0
        assert acc.damage == 1

    def test_range_union_rule(self, monkeypatch):
        monkeypatch.setitem(config.STAT_MERGE_RULES, 'lifetime', 'range_union')

        merged = merge_stats(Stats(lifetime=(10, 20)), Stats(lifetime=(5, 15)))

        assert merged.lifetime == (5, 20)

    def test_unknown_rule_is_a_config_error(self, monkeypatch):
        monkeypatch.setitem(config.STAT_MERGE_RULES, 'damage', 'multiply')

        with pytest.raises(WandConfigError):
            merge_stats(Stats(damage=1), Stats(damage=2))

    def test_merge_returns_new_value(self):
        a = Stats(damage=1)
        b = Stats(damage=2)

        merged = merge_stats(a, b)

        assert merged is not a and merged is not b
        assert a.damage == 1 and b.damage == 2

    def test_merge_mut_with_aliased_destination(self):
        acc = Stats(damage=1, lifetime=(1, 2))

        result = merge_stats_mut(acc, acc, Stats(damage=2, lifetime=(3, 4)))

        assert result is acc
        assert acc.damage == 3
        assert acc.lifetime == (4, 6)


class TestResolveStats:

    def test_fills_defaults(self):
        resolved = resolve_stats(Stats(damage=9))

        assert resolved.damage == 9
        assert resolved.speed == config.STAT_DEFAULTS['speed']
        assert resolved.bounces == config.STAT_DEFAULTS['bounces']
        assert resolved.lifetime == config.STAT_DEFAULTS['lifetime']

    def test_does_not_touch_input(self):
        stats = Stats(damage=9)
        resolve_stats(stats)

        assert stats.speed is None
