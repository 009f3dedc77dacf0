"""Tests for the weapon fire scheduler."""

import math
from dataclasses import replace

import pytest

from outer_frontiers.weapon import FireState, Weapon, schedule_fire


class TestScheduleFire:
    def test_catch_up_emits_every_owed_shot(self):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.02)
        new_state, offsets = schedule_fire(state, 0.35)

        assert offsets == pytest.approx([0.33, 0.23, 0.13, 0.03])
        assert new_state.cooldown == pytest.approx(0.07)

    def test_catch_up_offsets_are_one_interval_apart(self):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.02)
        _, offsets = schedule_fire(state, 0.35)

        ordered = sorted(offsets)
        gaps = [b - a for a, b in zip(ordered, ordered[1:])]
        assert gaps == pytest.approx([0.1, 0.1, 0.1])
        assert all(0.0 <= offset < 0.35 for offset in offsets)

    def test_ready_weapon_fires_at_once(self):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.0)
        new_state, offsets = schedule_fire(state, 0.016)

        assert offsets == [0.0]
        assert new_state.cooldown == pytest.approx(0.1)

    def test_short_frame_only_counts_down(self):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.05)
        new_state, offsets = schedule_fire(state, 0.01)

        assert offsets == []
        assert new_state.cooldown == pytest.approx(0.04)

    def test_latch_is_cleared(self):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.05)
        new_state, _ = schedule_fire(state, 0.01)
        assert new_state.is_firing is False
        assert new_state.fire_timeout == 0.1

    def test_idle_clamps_negative_cooldown(self):
        state = FireState(is_firing=False, fire_timeout=0.1, cooldown=-0.05)
        new_state, offsets = schedule_fire(state, 0.5)

        assert offsets == []
        assert new_state.cooldown == 0.0

    def test_idle_does_not_count_down(self):
        state = FireState(is_firing=False, fire_timeout=0.1, cooldown=0.04)
        new_state, offsets = schedule_fire(state, 0.5)

        assert offsets == []
        assert new_state.cooldown == pytest.approx(0.04)

    def test_fresh_weapon_long_frame_fires_once(self):
        # a ready weapon does not count the frame down, so only the due shot leaves
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.0)
        state, offsets = schedule_fire(state, 0.35)
        assert offsets == [0.0]
        assert state.cooldown == pytest.approx(0.1)

        _, offsets = schedule_fire(replace(state, is_firing=True), 0.35)
        assert offsets == pytest.approx([0.25, 0.15, 0.05])

    @pytest.mark.parametrize("fire_timeout", [0.0, -0.1, math.inf, math.nan])
    def test_invalid_fire_timeout(self, fire_timeout):
        with pytest.raises(ValueError):
            FireState(is_firing=True, fire_timeout=fire_timeout, cooldown=0.0)

    @pytest.mark.parametrize("cooldown", [-math.inf, math.inf, math.nan])
    def test_invalid_cooldown(self, cooldown):
        with pytest.raises(ValueError):
            FireState(is_firing=True, fire_timeout=0.1, cooldown=cooldown)

    @pytest.mark.parametrize("elapsed", [-0.01, math.inf, math.nan])
    def test_invalid_elapsed(self, elapsed):
        state = FireState(is_firing=True, fire_timeout=0.1, cooldown=0.05)
        with pytest.raises(ValueError):
            schedule_fire(state, elapsed)


class TestWeapon:
    @pytest.mark.parametrize("rate", [0.0, -1.0, math.inf, math.nan])
    def test_invalid_rate_of_fire(self, rate):
        with pytest.raises(ValueError):
            Weapon(rate)

    def test_fire_timeout_is_read_only(self):
        weapon = Weapon(10.0)
        with pytest.raises(AttributeError):
            weapon.fire_timeout = 0.0
        assert weapon.fire_timeout == pytest.approx(0.1)

    def test_infinite_step_is_rejected(self):
        weapon = Weapon(10.0)
        weapon.cooldown = 0.05
        weapon.fire()
        with pytest.raises(ValueError):
            weapon.step(math.inf)
        assert weapon.cooldown == pytest.approx(0.05)
        assert weapon.is_firing

    def test_default_rate(self):
        weapon = Weapon()
        assert weapon.fire_timeout == pytest.approx(0.05)
        assert weapon.rate_of_fire == pytest.approx(20.0)
        assert not weapon.is_firing

    def test_fire_sets_latch_until_next_step(self):
        weapon = Weapon(10.0)
        weapon.fire()
        assert weapon.is_firing
        assert weapon.step(0.016) == [0.0]
        assert not weapon.is_firing
        assert weapon.step(0.2) == []

    @pytest.mark.parametrize("rate, dt", [(20.0, 1.0 / 60.0), (10.0, 0.35), (7.0, 0.5)])
    def test_long_run_rate(self, rate, dt):
        weapon = Weapon(rate)
        frames = 600
        shots = 0
        for _ in range(frames):
            weapon.fire()
            shots += len(weapon.step(dt))

        # first shot leaves at once, the rest follow at the nominal rate
        expected = 1 + rate * (frames - 1) * dt
        assert abs(shots - expected) <= 1.0

    def test_cooldown_never_negative_after_release(self):
        weapon = Weapon(10.0)
        for _ in range(5):
            weapon.fire()
            weapon.step(0.35)
        for _ in range(5):
            assert weapon.step(0.35) == []
            assert weapon.cooldown >= 0.0
