"""Shared fixtures for LUXIA Studio tests."""

import pytest

from luxia_studio.models.field_schema import (
    FieldKind,
    FieldRole,
    FieldSchema,
    ServiceDefinition,
    ServiceKind,
)
from luxia_studio.tracing import disable_tracing


@pytest.fixture(autouse=True, scope="session")
def _no_tracing():
    disable_tracing()


@pytest.fixture
def style_service() -> ServiceDefinition:
    """Photoshop-style service: a dropdown plus description and comments."""
    return ServiceDefinition(
        service_name=ServiceKind.PHOTOSHOP_IMAGE.value,
        description="Test service",
        fields=[
            FieldSchema(
                name="Image de référence (optionnelle)",
                kind=FieldKind.UPLOAD,
                role=FieldRole.PRIMARY_INPUT,
            ),
            FieldSchema(name="Style", kind=FieldKind.DROPDOWN, options=["Cinematic", "Natural"]),
            FieldSchema(name="Effets", kind=FieldKind.CHECKBOX_GROUP, options=["Grain", "Bokeh", "Néon"]),
            FieldSchema(name="Nombre", kind=FieldKind.NUMBER, max=4),
            FieldSchema(
                name="Champ de description",
                kind=FieldKind.TEXTAREA,
                required=True,
                role=FieldRole.DESCRIPTION,
            ),
            FieldSchema(
                name="Commentaires supplémentaires",
                kind=FieldKind.TEXTAREA,
                role=FieldRole.COMMENTS,
            ),
        ],
    )


@pytest.fixture
def photo_service() -> ServiceDefinition:
    """Service whose reference image is required."""
    return ServiceDefinition(
        service_name=ServiceKind.REALISTIC_PHOTO.value,
        fields=[
            FieldSchema(
                name="Image de référence",
                kind=FieldKind.UPLOAD,
                required=True,
                role=FieldRole.PRIMARY_INPUT,
            ),
            FieldSchema(name="Éclairage", kind=FieldKind.DROPDOWN, options=["Studio", "Néon"]),
        ],
    )
