"""
Tests for HeadBodyParticle, CircularValue and the circular statistics helpers.

Run: pytest test_particle.py -v
"""

import math

import pytest
import numpy as np
from numpy.random import default_rng

from head_body_tracker.models import (
    CircularValue,
    HeadBodyParticle,
    particles_from_array,
    particles_to_array,
)
from head_body_tracker.utils import (
    GaussianSampler,
    angle_to_sector,
    chunked_weighted_sums,
    circular_spread,
    draw_seed,
    make_seeder,
    resultant_vector,
    sector_to_angle,
    weighted_linear_mean,
    weighted_sums,
)
from head_body_tracker.errors import ConfigurationError


# ============================================================================
# Particle state
# ============================================================================

class TestHeadBodyParticle:

    def test_defaults(self):
        p = HeadBodyParticle()
        assert p.as_array().tolist() == [0.0] * 5

    def test_sector_setters(self):
        p = HeadBodyParticle()
        p.set_dh_sector(3)
        p.set_db_sector(np.int64(7))
        assert p.dh == 3.0 and isinstance(p.dh, float)
        assert p.db == 7.0

    @pytest.mark.parametrize("bad", [2.5, True, "3"])
    def test_sector_setter_rejects_non_integers(self, bad):
        with pytest.raises(TypeError):
            HeadBodyParticle().set_dh_sector(bad)

    def test_continuous_setters(self):
        p = HeadBodyParticle()
        p.set_dh_continuous(np.float32(1.25))
        p.set_db_continuous(-9)
        assert p.dh == 1.25
        assert p.db == -9.0

    def test_sector_readback_wraps(self):
        p = HeadBodyParticle(dh=8.4, db=-1.2)
        assert p.dh_sector() == 0
        assert p.db_sector() == 7

    def test_storage_not_wrapped(self):
        p = HeadBodyParticle(dh=12.0)
        assert p.dh == 12.0
        assert p.head_direction().wrapped() == 4.0

    def test_copy_is_independent(self):
        p = HeadBodyParticle(1.0, 2.0, 3.0, 4.0, 5.0)
        q = p.copy()
        q.x = 10.0
        assert p.x == 1.0

    def test_from_array_wrong_length(self):
        with pytest.raises(ValueError):
            HeadBodyParticle.from_array([1.0, 2.0, 3.0])

    def test_array_marshalling(self):
        states = default_rng(0).normal(size=(6, 5))
        particles = particles_from_array(states)
        assert len(particles) == 6
        assert particles[2].db == states[2, 4]
        assert np.array_equal(particles_to_array(particles), states)

    def test_empty_set_to_array(self):
        assert particles_to_array([]).shape == (0, 5)

    def test_from_array_bad_shape(self):
        with pytest.raises(ValueError):
            particles_from_array(np.zeros((3, 4)))


class TestCircularValue:

    def test_to_radians(self):
        assert CircularValue(2.0).to_radians() == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize("a, b, expected", [
        (0.0, 7.0, 1.0),
        (7.0, 0.0, -1.0),
        (4.0, 0.0, 4.0),
        (1.0, 9.0, 0.0),
        (3.5, 0.5, 3.0),
    ])
    def test_distance(self, a, b, expected):
        assert CircularValue(a).distance(CircularValue(b)) == pytest.approx(expected)

    def test_distance_modulus_mismatch(self):
        with pytest.raises(ValueError):
            CircularValue(1.0, 8).distance(CircularValue(1.0, 360))


# ============================================================================
# Sampling
# ============================================================================

class TestGaussianSampler:

    def test_negative_sigma_rejected(self):
        with pytest.raises(ConfigurationError):
            GaussianSampler(-1.0)

    def test_zero_sigma_exact(self):
        s = GaussianSampler(0.0, seed=1)
        assert s() == 0.0
        assert np.all(s.draw(10) == 0.0)

    def test_reseed_repeats_stream(self):
        s = GaussianSampler(1.0, seed=4)
        first = [s() for _ in range(3)]
        s.seed(4)
        assert [s() for _ in range(3)] == first

    def test_draw_statistics(self):
        samples = GaussianSampler(2.0, seed=0).draw(20000)
        assert abs(samples.mean()) < 0.1
        assert samples.std() == pytest.approx(2.0, rel=0.05)

    def test_seeder_distinct_seeds(self):
        seeder = make_seeder(0)
        seeds = [draw_seed(seeder) for _ in range(5)]
        assert len(set(seeds)) == 5
        assert all(0 <= s < 2**31 for s in seeds)

    def test_wall_clock_seeder(self):
        assert isinstance(draw_seed(make_seeder()), int)


# ============================================================================
# Circular statistics
# ============================================================================

class TestCircularStatistics:

    def test_angle_conversions(self):
        values = np.array([0.0, 2.0, 4.0, -1.0])
        assert np.allclose(sector_to_angle(values), [0.0, np.pi / 2, np.pi, -np.pi / 4])
        assert np.allclose(angle_to_sector(sector_to_angle(values)), values)

    def test_resultant_vector(self):
        V = resultant_vector(np.array([0.0, 2.0]), np.array([1.0, 3.0]))
        assert np.allclose(V, [1.0, 3.0])

    def test_weighted_linear_mean(self):
        assert weighted_linear_mean([0.0, 10.0], [3.0, 1.0]) == pytest.approx(2.5)

    def test_chunked_sums_equal_serial(self):
        rng = default_rng(3)
        states = rng.normal(size=(257, 5))
        weights = rng.uniform(size=257)
        serial = weighted_sums(states, weights)
        chunked = chunked_weighted_sums(states, weights, n_workers=3, chunk_size=16)
        assert chunked.weight == pytest.approx(serial.weight)
        assert np.allclose(chunked.linear, serial.linear)
        assert np.allclose(chunked.head, serial.head)
        assert np.allclose(chunked.body, serial.body)

    def test_circular_spread(self):
        concentrated = default_rng(0).normal(loc=2.0, scale=0.3, size=5000)
        assert circular_spread(concentrated) == pytest.approx(0.3, rel=0.1)
