from conftest import StubProvider
from geofee.models.domain import Coordinates
from geofee.services.geocoding import GeocodeResolver
from geofee.services.rate_limiter import RateLimiter
from geofee.services.telemetry import SupabaseUsageSink, emit_usage


class _FakeQuery:
    def __init__(self, rows: list) -> None:
        self.rows = rows
        self.pending = None

    def insert(self, row: dict) -> "_FakeQuery":
        self.pending = row
        return self

    def execute(self) -> None:
        self.rows.append(self.pending)


class _FakeSupabase:
    def __init__(self) -> None:
        self.tables: dict[str, list] = {}

    def table(self, name: str) -> _FakeQuery:
        return _FakeQuery(self.tables.setdefault(name, []))


class _RecordingSink:
    def __init__(self) -> None:
        self.events: list = []

    def record(self, action, metadata) -> None:
        self.events.append((action, metadata))


class _BrokenSink:
    def record(self, action, metadata) -> None:
        raise RuntimeError("table missing")


def test_supabase_sink_inserts_activity_row():
    client = _FakeSupabase()
    sink = SupabaseUsageSink(client_factory=lambda: client, user_id="user-1")

    sink.record("geocode", {"address": "1 Main St"})

    assert client.tables["user_activity_log"] == [
        {"user_id": "user-1", "action_type": "google_maps_geocode", "metadata": {"address": "1 Main St"}}
    ]


def test_supabase_sink_skips_when_unconfigured():
    SupabaseUsageSink(client_factory=lambda: None).record("distance", {})


def test_emit_usage_swallows_sink_failures():
    emit_usage(_BrokenSink(), "geocode", {})
    emit_usage(None, "geocode", {})


def test_cache_hits_are_not_billed():
    sink = _RecordingSink()
    provider = StubProvider(addresses={"1 main st": Coordinates(41.88, -87.63)})
    resolver = GeocodeResolver(provider, RateLimiter(), usage_sink=sink)

    resolver.resolve("1 Main St")
    resolver.resolve("  1 MAIN ST ")

    assert sink.events == [("geocode", {"address": "1 Main St"})]


def test_failing_sink_does_not_break_resolution():
    provider = StubProvider(addresses={"1 main st": Coordinates(41.88, -87.63)})
    resolver = GeocodeResolver(provider, RateLimiter(), usage_sink=_BrokenSink())

    assert resolver.resolve("1 Main St") == Coordinates(41.88, -87.63)
