"""Tests for the Nominatim-backed geocoding service."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from forecast_lookup.weather.errors import GeocodingError
from forecast_lookup.weather.geocoding import GeocodingService
from forecast_lookup.weather.models import Coordinates


def _location(lat, lon, **address):
    return SimpleNamespace(latitude=lat, longitude=lon, raw={"address": address})


@pytest.fixture
def geolocator():
    return MagicMock()


@pytest.fixture
def service(geolocator):
    return GeocodingService(geolocator=geolocator)


class TestSearch:
    def test_best_match_first_with_metadata(self, service, geolocator):
        geolocator.geocode.return_value = [
            _location(37.79, -122.39, city="San Francisco", state="California", country="United States"),
            _location(40.0, -75.0, town="Elsewhere"),
        ]

        results = service.search("94105")

        assert results[0] == Coordinates(
            lat=37.79, lon=-122.39, city="San Francisco", state="California", country="United States"
        )
        assert results[1].city == "Elsewhere"
        geolocator.geocode.assert_called_once_with("94105", exactly_one=False, addressdetails=True, limit=5)

    def test_city_falls_back_through_address_fields(self, service, geolocator):
        geolocator.geocode.return_value = [_location(51.0, 0.1, county="East Sussex")]
        assert service.search("Rural lane")[0].city == "East Sussex"

    def test_no_match(self, service, geolocator):
        geolocator.geocode.return_value = None
        assert service.search("Atlantis") == []

    def test_blank_query_skips_provider(self, service, geolocator):
        assert service.search("  ") == []
        geolocator.geocode.assert_not_called()

    def test_results_memoized(self, service, geolocator):
        geolocator.geocode.return_value = [_location(48.85, 2.35, city="Paris")]
        service.search("Paris")
        service.search("Paris")
        assert geolocator.geocode.call_count == 1

    def test_returned_list_is_a_copy(self, service, geolocator):
        geolocator.geocode.return_value = [_location(48.85, 2.35, city="Paris")]
        service.search("Paris").clear()
        assert len(service.search("Paris")) == 1

    def test_timeout_raises_geocoding_error(self, service, geolocator):
        geolocator.geocode.side_effect = GeocoderTimedOut("slow")
        with pytest.raises(GeocodingError, match="temporarily unavailable"):
            service.search("Paris")

    def test_provider_error_raises_geocoding_error(self, service, geolocator):
        geolocator.geocode.side_effect = GeocoderServiceError("bad request")
        with pytest.raises(GeocodingError):
            service.search("Paris")

    def test_unexpected_error_raises_geocoding_error(self, service, geolocator):
        geolocator.geocode.side_effect = ValueError("malformed response")
        with pytest.raises(GeocodingError, match="malformed response"):
            service.search("Paris")
