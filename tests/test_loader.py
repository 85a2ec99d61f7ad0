"""
Tests for merging the two listings into the service table.
"""

from unitsync.loader import ServiceLoader
from unitsync.schema import ServiceRecord, UnitListing, UnitState


def _loader(unit_files=None, units=None) -> ServiceLoader:
    return ServiceLoader(UnitListing(unit_files=unit_files or {}, units=units or {}))


def test_service_in_both_listings_gets_all_fields():
    services = _loader(
        {"cups": "enabled"},
        {"cups": UnitState(load_state="loaded", active=True, description="CUPS Scheduler")},
    ).read()
    assert services["cups"] == ServiceRecord(
        enabled=True, active=True, loaded=True, description="CUPS Scheduler", modified=False
    )


def test_unit_file_only_gets_defaults():
    services = _loader({"nfs-server": "enabled"}).read()
    assert services["nfs-server"] == ServiceRecord(enabled=True)
    assert services["nfs-server"].active is False
    assert services["nfs-server"].loaded is False


def test_unit_only_is_kept_and_disabled():
    services = _loader(units={"user@1000": UnitState(load_state="loaded", active=True)}).read()
    assert services["user@1000"].enabled is False
    assert services["user@1000"].active is True
    assert services["user@1000"].loaded is True


def test_static_unit_is_excluded_even_when_loaded():
    loader = _loader(
        {"systemd-journald": "static", "masked-one": "masked"},
        {
            "systemd-journald": UnitState(load_state="loaded", active=True),
            "masked-one": UnitState(load_state="loaded"),
        },
    )
    assert loader.supported_units() == {}
    assert loader.read() == {}


def test_not_loaded_units_are_dropped():
    loader = _loader(units={"ypbind": UnitState(load_state="not-found")})
    assert loader.clean_units() == {}
    assert loader.read() == {}


def test_not_loaded_unit_with_unit_file_keeps_enablement():
    services = _loader(
        {"ghost": "disabled"},
        {"ghost": UnitState(load_state="error", active=True, description="Ghost")},
    ).read()
    assert services["ghost"] == ServiceRecord(enabled=False)


def test_table_is_sorted_by_name():
    services = _loader({"b": "enabled", "a": "disabled", "c": "enabled"}).read()
    assert list(services) == ["a", "b", "c"]


def test_each_read_builds_fresh_records():
    loader = _loader({"cups": "enabled"})
    first = loader.read()
    first["cups"].enabled = False
    assert loader.read()["cups"].enabled is True
