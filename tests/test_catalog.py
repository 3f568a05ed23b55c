"""Tests for the service catalog."""

import json

import pytest

from luxia_studio.capabilities import CapabilityRegistry
from luxia_studio.catalog import (
    BUILTIN_SERVICES,
    check_registry,
    find_service,
    get_catalog,
    load_catalog,
)
from luxia_studio.config import update_config
from luxia_studio.errors import ConfigurationError
from luxia_studio.models.field_schema import FieldKind, ServiceKind
from luxia_studio.models.form_state import initialize


async def _noop(prompt, file_input=None, on_progress=None):
    return []


class TestBuiltinCatalog:
    """Tests for the built-in services."""

    def test_every_service_kind_is_described(self):
        assert {service.kind for service in BUILTIN_SERVICES} == set(ServiceKind)

    def test_every_service_has_a_description_field(self):
        for service in BUILTIN_SERVICES:
            assert service.description_field is not None
            assert service.comments_field is not None
            assert service.primary_input_field.kind is FieldKind.UPLOAD

    def test_realistic_photo_requires_reference(self):
        service = find_service(ServiceKind.REALISTIC_PHOTO.value, BUILTIN_SERVICES)
        assert service.primary_input_field.required is True

    def test_builtin_forms_initialize(self):
        for service in BUILTIN_SERVICES:
            state = initialize(service)
            assert list(state) == service.field_names

    def test_find_unknown_service(self):
        with pytest.raises(ConfigurationError):
            find_service("Inconnu", BUILTIN_SERVICES)


class TestLoadCatalog:
    """Tests for loading JSON catalogs."""

    def test_round_trip_of_builtin_catalog(self, tmp_path):
        """Test the exported form configs load back."""
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps([service.to_form_config() for service in BUILTIN_SERVICES]),
            encoding="utf-8",
        )
        services = load_catalog(path)
        assert [s.service_name for s in services] == [s.service_name for s in BUILTIN_SERVICES]
        assert services[2].field("Durée (secondes)").default == 8

    def test_unknown_service_name(self, tmp_path):
        """Test an unknown service name is rejected at load time."""
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps([{"serviceName": "Générateur Audio", "fields": []}]),
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError) as exc_info:
            load_catalog(path)
        assert exc_info.value.service_name == "Générateur Audio"

    def test_unknown_field_kind(self, tmp_path):
        """Test an unsupported field kind is rejected."""
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps([{
                "serviceName": ServiceKind.VEO_VIDEO.value,
                "fields": [{"name": "Couleur", "kind": "colorPicker"}],
            }]),
            encoding="utf-8",
        )
        with pytest.raises(ConfigurationError):
            load_catalog(path)

    def test_duplicate_service(self, tmp_path):
        """Test a service declared twice is rejected."""
        entry = {"serviceName": ServiceKind.VEO_VIDEO.value, "fields": []}
        path = tmp_path / "catalog.json"
        path.write_text(json.dumps([entry, entry]), encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_catalog(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "catalog.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_catalog(path)

    def test_configured_catalog_path(self, tmp_path):
        """Test get_catalog reads config.catalog_path."""
        path = tmp_path / "catalog.json"
        path.write_text(
            json.dumps([{"serviceName": ServiceKind.VEO_VIDEO.value, "fields": []}]),
            encoding="utf-8",
        )
        update_config(catalog_path=str(path))
        try:
            assert [s.kind for s in get_catalog()] == [ServiceKind.VEO_VIDEO]
        finally:
            update_config(catalog_path=None)


class TestCheckRegistry:
    """Tests for catalog/registry consistency."""

    def test_complete_registry(self):
        registry = CapabilityRegistry({kind: _noop for kind in ServiceKind})
        check_registry(BUILTIN_SERVICES, registry)
        assert registry.missing() == []

    def test_incomplete_registry(self):
        registry = CapabilityRegistry({ServiceKind.VEO_VIDEO: _noop})
        assert ServiceKind.REALISTIC_PHOTO in registry.missing()
        with pytest.raises(ConfigurationError):
            check_registry(BUILTIN_SERVICES, registry)

    def test_resolve_missing(self):
        with pytest.raises(ConfigurationError):
            CapabilityRegistry().resolve(ServiceKind.VEO_VIDEO)
