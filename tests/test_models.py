"""Tests for LUXIA Studio data models."""

import pytest

from luxia_studio.errors import ConfigurationError
from luxia_studio.models.field_schema import (
    FieldKind,
    FieldRole,
    FieldSchema,
    ServiceDefinition,
    ServiceKind,
)
from luxia_studio.models.generation_result import (
    GenerationResult,
    MediaKind,
    download_name,
)


class TestFieldSchema:
    """Tests for FieldSchema model."""

    def test_basic_field(self):
        """Test creating a basic field."""
        field = FieldSchema(name="Champ de description", kind="textarea")
        assert field.kind is FieldKind.TEXTAREA
        assert field.required is False
        assert field.role is FieldRole.NONE
        assert field.default is None

    def test_camel_case_aliases(self):
        """Test that catalog-style keys are accepted."""
        field = FieldSchema.model_validate(
            {"name": "Durée", "kind": "number", "defaultValue": 8, "max": 8}
        )
        assert field.default == 8
        assert field.max == 8

    def test_dropdown_requires_options(self):
        """Test dropdown without options is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Style", kind=FieldKind.DROPDOWN)

    def test_options_rejected_for_textarea(self):
        """Test options on a textarea are rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Texte", kind=FieldKind.TEXTAREA, options=["a"])

    def test_max_only_for_number(self):
        """Test max on a non-number field is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Texte", kind=FieldKind.TEXTAREA, max=3)

    def test_placeholder_only_for_textarea(self):
        """Test placeholder on a dropdown is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Style", kind=FieldKind.DROPDOWN, options=["a"], placeholder="x")

    def test_role_kind_mismatch(self):
        """Test a description role on an upload field is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Image", kind=FieldKind.UPLOAD, role=FieldRole.DESCRIPTION)

    def test_dropdown_default_must_be_an_option(self):
        """Test dropdown default outside the options is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Style", kind=FieldKind.DROPDOWN, options=["a", "b"], default="c")

    def test_number_default_above_max(self):
        """Test number default larger than max is rejected."""
        with pytest.raises(ConfigurationError):
            FieldSchema(name="Durée", kind=FieldKind.NUMBER, default=10, max=8)


class TestServiceDefinition:
    """Tests for ServiceDefinition model."""

    def test_service_creation(self, style_service):
        """Test creating a service and reading its roles."""
        assert style_service.kind is ServiceKind.PHOTOSHOP_IMAGE
        assert style_service.description_field.name == "Champ de description"
        assert style_service.comments_field.name == "Commentaires supplémentaires"
        assert style_service.primary_input_field.name == "Image de référence (optionnelle)"
        assert [f.name for f in style_service.upload_fields] == ["Image de référence (optionnelle)"]

    def test_unknown_service_name(self):
        """Test an unknown service name is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            ServiceDefinition(service_name="Générateur de sons", fields=[])
        assert exc_info.value.service_name == "Générateur de sons"

    def test_duplicate_field_names(self):
        """Test duplicate field names are rejected."""
        with pytest.raises(ConfigurationError):
            ServiceDefinition(
                service_name=ServiceKind.VEO_VIDEO.value,
                fields=[
                    FieldSchema(name="Style", kind=FieldKind.TEXTAREA),
                    FieldSchema(name="Style", kind=FieldKind.TEXTAREA),
                ],
            )

    def test_role_declared_twice(self):
        """Test two description fields are rejected."""
        with pytest.raises(ConfigurationError):
            ServiceDefinition(
                service_name=ServiceKind.VEO_VIDEO.value,
                fields=[
                    FieldSchema(name="A", kind=FieldKind.TEXTAREA, role=FieldRole.DESCRIPTION),
                    FieldSchema(name="B", kind=FieldKind.TEXTAREA, role=FieldRole.DESCRIPTION),
                ],
            )

    def test_field_lookup(self, style_service):
        """Test looking up fields by name."""
        assert style_service.field("Style").options == ("Cinematic", "Natural")
        with pytest.raises(KeyError):
            style_service.field("Inconnu")

    def test_form_config_export(self, style_service):
        """Test exporting the service for clients."""
        config = style_service.to_form_config()
        assert config["serviceName"] == ServiceKind.PHOTOSHOP_IMAGE.value
        assert [f["name"] for f in config["fields"]] == style_service.field_names
        style = config["fields"][1]
        assert style["kind"] == "dropdown"
        assert style["options"] == ["Cinematic", "Natural"]
        assert "placeholder" not in style


class TestGenerationResult:
    """Tests for GenerationResult and download names."""

    def test_download_name_image(self):
        """Test image download name."""
        assert download_name(MediaKind.IMAGE, 1700000000000) == "luxia-studio-result-1700000000000.png"

    def test_download_name_video(self):
        """Test video download name."""
        assert download_name(MediaKind.VIDEO, 42) == "luxia-studio-result-42.mp4"

    def test_download_name_is_deterministic(self):
        """Test same inputs give the same name."""
        result = GenerationResult(kind="image", url="https://example.com/a.png")
        assert result.download_name(123) == result.download_name(123)

    def test_download_name_uses_current_time(self):
        """Test download name without an explicit timestamp."""
        result = GenerationResult(kind="video", url="https://example.com/a.mp4")
        name = result.download_name()
        assert name.startswith("luxia-studio-result-")
        assert name.endswith(".mp4")

    def test_from_bytes(self):
        """Test building a data URL result."""
        result = GenerationResult.from_bytes(MediaKind.IMAGE, b"\x89PNG")
        assert result.url == "data:image/png;base64,iVBORw=="
        assert result.is_data_url
        assert result.mime_type == "image/png"

    def test_mime_type_from_data_url(self):
        """Test mime type is read from the data URL header."""
        result = GenerationResult.from_bytes(MediaKind.IMAGE, b"abc", "image/jpeg")
        assert result.mime_type == "image/jpeg"

    def test_remote_url_mime_type(self):
        """Test remote URLs fall back to the kind's default mime type."""
        result = GenerationResult(kind=MediaKind.VIDEO, url="https://example.com/v")
        assert result.mime_type == "video/mp4"
