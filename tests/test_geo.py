import numpy as np
import pytest

from autonavigation.geo import GeoPosition, to_cartesian


def test_equator_prime_meridian_on_surface():
    geo = GeoPosition(latitude=0.0, longitude=0.0, height=0.0, reference_body="Earth", radius=6.0)
    assert np.allclose(to_cartesian(geo), [6.0, 0.0, 0.0])


def test_north_pole_with_height():
    geo = GeoPosition(90.0, 0.0, 2.0, "Earth", 10.0)
    assert np.allclose(geo.to_cartesian(), [0.0, 0.0, 12.0])


def test_longitude_ninety_points_along_y():
    geo = GeoPosition(0.0, 90.0, 0.0, "Earth", 3.0)
    assert np.allclose(to_cartesian(geo), [0.0, 3.0, 0.0])


def test_negative_height_is_accepted():
    geo = GeoPosition(0.0, 0.0, -1.0, "Earth", 10.0)
    assert np.allclose(to_cartesian(geo), [9.0, 0.0, 0.0])


def test_longitude_wraps():
    a = GeoPosition(30.0, 10.0, 1.0, "Earth", 5.0)
    b = GeoPosition(30.0, 370.0, 1.0, "Earth", 5.0)
    assert np.allclose(to_cartesian(a), to_cartesian(b))


def test_distance_from_center_is_radius_plus_height():
    geo = GeoPosition(-42.5, 133.0, 4.0, "Earth", 20.0)
    assert np.linalg.norm(to_cartesian(geo)) == pytest.approx(24.0)


@pytest.mark.parametrize("latitude", [-90.5, 91.0])
def test_latitude_out_of_range_is_rejected(latitude):
    with pytest.raises(ValueError):
        GeoPosition(latitude, 0.0, 0.0, "Earth", 1.0)
