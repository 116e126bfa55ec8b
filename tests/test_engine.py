from conftest import point_miles_east
from geofee.config import Settings
from geofee.models.domain import Coordinates
from geofee.persistence.filesystem import JsonFileBackend
from geofee.services.engine import GeoEngine
from geofee.services.providers.base import NullProvider
from geofee.services.providers.google_maps import GoogleMapsClient
from geofee.services.telemetry import LoggingUsageSink



def _settings(**overrides) -> Settings:
    values = {"google_maps_api_key": None, "supabase_url": None, "supabase_key": None, "location_store_path": None}
    values.update(overrides)
    return Settings(**values)


def test_engine_without_api_key_degrades_to_estimates():
    engine = GeoEngine.from_settings(_settings())

    assert isinstance(engine.provider, NullProvider)
    assert isinstance(engine.usage_sink, LoggingUsageSink)
    [result] = engine.distances.resolve(Coordinates(0.0, 0.0), [point_miles_east(3.0)])
    assert result.source == "fallback"
    assert result.distance_miles == 3.0


def test_engine_uses_google_client_and_file_store(tmp_path):
    engine = GeoEngine.from_settings(
        _settings(google_maps_api_key="test-key", location_store_path=str(tmp_path), rate_limit_per_minute=5)
    )

    assert isinstance(engine.provider, GoogleMapsClient)
    assert engine.provider.rate_limiter is engine.rate_limiter
    assert isinstance(engine.location_store.backend, JsonFileBackend)
    assert engine.rate_limiter.remaining("geocode") == 5

    engine.location_store.save(Coordinates(37.7879, -122.4075), "123 Union Square")
    assert list(tmp_path.glob("*.json"))


def test_engines_do_not_share_state():
    first = GeoEngine.from_settings(_settings())
    second = GeoEngine.from_settings(_settings())

    first.location_store.save(Coordinates(1.0, 1.0))
    assert second.location_store.load() is None
    assert first.rate_limiter is not second.rate_limiter


def test_engine_defaults_to_the_shared_fallback_speed():
    from conftest import FailingProvider
    from geofee.services.geospatial import DEFAULT_MINUTES_PER_MILE

    engine = GeoEngine(provider=FailingProvider())

    [result] = engine.distances.resolve(Coordinates(0.0, 0.0), [point_miles_east(2.0)])
    assert engine.distances.minutes_per_mile == DEFAULT_MINUTES_PER_MILE
    assert result.duration_minutes == 2.0 * DEFAULT_MINUTES_PER_MILE
