"""Tests for the astrocore.atmosphere module.

Reference values from the US Standard Atmosphere 1976.
"""

import jax.numpy as jnp
import pytest

from astrocore.atmosphere import TabulatedAtmosphere
from astrocore.interpolators import LookupScheme

# Altitude [m], temperature [K], pressure [Pa], density [kg/m^3]
_USSA1976 = (
    (0.0, 288.15, 101325.0, 1.2250),
    (1000.0, 281.65, 89876.0, 1.1117),
    (2000.0, 275.15, 79501.0, 1.0066),
    (3000.0, 268.65, 70121.0, 0.90925),
    (4000.0, 262.15, 61660.0, 0.81935),
    (5000.0, 255.65, 54048.0, 0.73643),
    (6000.0, 249.15, 47217.0, 0.66011),
    (7000.0, 242.65, 41105.0, 0.59002),
    (8000.0, 236.15, 35651.0, 0.52579),
    (9000.0, 229.65, 30800.0, 0.46706),
    (10000.0, 223.15, 26500.0, 0.41351),
    (11000.0, 216.65, 22700.0, 0.36480),
    (12000.0, 216.65, 19399.0, 0.31194),
)


def _profile(column):
    """One column of the reference table as an array of the configured dtype."""
    return jnp.array([row[column] for row in _USSA1976])


def _make_atmosphere(lookup_scheme=LookupScheme.HUNTING_ALGORITHM):
    return TabulatedAtmosphere(
        altitudes=_profile(0),
        densities=_profile(3),
        pressures=_profile(2),
        temperatures=_profile(1),
        lookup_scheme=lookup_scheme,
    )


@pytest.fixture
def atmosphere():
    return _make_atmosphere()


class TestTabulatedAtmosphere:
    def test_sea_level(self, atmosphere):
        assert float(atmosphere.get_temperature(0.0)) == pytest.approx(288.15, rel=1e-12)
        assert float(atmosphere.get_density(0.0)) == pytest.approx(1.225, rel=1e-12)
        assert float(atmosphere.get_pressure(0.0)) == pytest.approx(101325.0, rel=1e-12)

    def test_ten_kilometres(self, atmosphere):
        """Tabulated altitudes reproduce the table, with or without position arguments."""
        assert float(atmosphere.get_temperature(10.0e3, 0.0, 0.0, 0.0)) == pytest.approx(223.15)
        assert float(atmosphere.get_density(10.0e3, 0.0, 0.0, 0.0)) == pytest.approx(0.41351)
        assert float(atmosphere.get_pressure(10.0e3, 0.0, 0.0, 0.0)) == pytest.approx(26500.0)

    def test_between_table_entries(self, atmosphere):
        """5.5 km lies on the linear temperature lapse and the exponential profiles."""
        assert float(atmosphere.get_temperature(5.5e3)) == pytest.approx(252.40, abs=0.05)
        assert float(atmosphere.get_density(5.5e3)) == pytest.approx(0.6973, abs=5e-4)
        assert float(atmosphere.get_pressure(5.5e3)) == pytest.approx(50539.0, abs=10.0)

    def test_position_independent(self, atmosphere):
        """Longitude, latitude and time do not change the result."""
        altitude = 7.3e3
        assert float(atmosphere.get_density(altitude)) == float(
            atmosphere.get_density(altitude, 1.2, -0.4, 3600.0)
        )
        assert float(atmosphere.get_pressure(altitude)) == float(
            atmosphere.get_pressure(altitude, 1.2, -0.4, 3600.0)
        )
        assert float(atmosphere.get_temperature(altitude)) == float(
            atmosphere.get_temperature(altitude, 1.2, -0.4, 3600.0)
        )

    def test_density_decreases_with_altitude(self, atmosphere):
        altitudes = jnp.linspace(0.0, 12.0e3, 49)
        densities = jnp.array([atmosphere.get_density(h) for h in altitudes])
        assert bool(jnp.all(jnp.diff(densities) < 0.0))

    def test_binary_search_lookup_matches_hunting(self):
        binary = _make_atmosphere(LookupScheme.BINARY_SEARCH)
        hunting = _make_atmosphere(LookupScheme.HUNTING_ALGORITHM)
        for altitude in (11.5e3, 250.0, 6.1e3, 6.2e3):
            assert float(binary.get_density(altitude)) == pytest.approx(
                float(hunting.get_density(altitude)), rel=1e-14
            )

    def test_altitudes_property(self, atmosphere):
        assert jnp.allclose(atmosphere.altitudes, _profile(0))

    def test_mismatched_profile_raises(self):
        with pytest.raises(ValueError, match="dependent values must have shape"):
            TabulatedAtmosphere(_profile(0), _profile(3)[:-1], _profile(2), _profile(1))

    def test_unsorted_altitudes_raise(self):
        with pytest.raises(ValueError, match="strictly ascending"):
            TabulatedAtmosphere(_profile(0)[::-1], _profile(3), _profile(2), _profile(1))
