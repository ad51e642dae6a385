from backend.app.services.decode_cache import CacheEntry, DecodeCache
from backend.app.services.vpic_client import DecodedVehicle


def test_get_returns_none_on_miss():
    cache = DecodeCache()
    assert cache.get("1HGCM82633A123456") is None
    assert "1HGCM82633A123456" not in cache


def test_put_records_entry_with_timestamp():
    cache = DecodeCache(clock=lambda: 42.0)
    vehicle = DecodedVehicle("Honda", "Accord", "2003")

    cache.put("1HGCM82633A123456", vehicle)

    assert cache.get("1HGCM82633A123456") is vehicle
    assert cache.entry("1HGCM82633A123456") == CacheEntry(vehicle=vehicle, cached_at=42.0)
    assert len(cache) == 1


def test_put_overwrites_and_lookup_is_exact():
    cache = DecodeCache()
    cache.put("1HGCM82633A123456", DecodedVehicle("Honda", "Accord", "2003"))
    cache.put("1HGCM82633A123456", DecodedVehicle("Honda", "Accord", 2003))

    assert cache.get("1HGCM82633A123456").year == 2003
    assert cache.get("1hgcm82633a123456") is None
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_put_not_found_stores_unknown_placeholder():
    cache = DecodeCache(clock=lambda: 7.0)
    cache.put_not_found("JTENU5JR4R5299991")

    assert cache.get("JTENU5JR4R5299991") == DecodedVehicle.unknown()
    assert cache.entry("JTENU5JR4R5299991") == CacheEntry(
        vehicle=DecodedVehicle.unknown(), cached_at=7.0, found=False
    )
    assert cache.entry("JTENU5JR4R5299991").found is False
