"""
Service catalog.

The built-in catalog describes the three LUXIA Studio services.
Alternative catalogs can be loaded from a JSON file; every service is
validated at load time, so an unknown service name or an inconsistent
field is reported before any form is shown.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from luxia_studio.capabilities import CapabilityRegistry
from luxia_studio.config import get_config
from luxia_studio.errors import ConfigurationError
from luxia_studio.models.field_schema import (
    FieldKind,
    FieldRole,
    FieldSchema,
    ServiceDefinition,
    ServiceKind,
)

logger = logging.getLogger("luxia-studio")

DESCRIPTION_FIELD = "Champ de description"
COMMENTS_FIELD = "Commentaires supplémentaires"
REFERENCE_IMAGE_FIELD = "Image de référence"
OPTIONAL_REFERENCE_IMAGE_FIELD = "Image de référence (optionnelle)"

_catalog_adapter = TypeAdapter(list[ServiceDefinition])


def _comments_field() -> FieldSchema:
    return FieldSchema(
        name=COMMENTS_FIELD,
        kind=FieldKind.TEXTAREA,
        placeholder="Précisions, contraintes, éléments à éviter...",
        role=FieldRole.COMMENTS,
    )


BUILTIN_SERVICES: tuple[ServiceDefinition, ...] = (
    ServiceDefinition(
        service_name=ServiceKind.REALISTIC_PHOTO.value,
        description="Transformez une photo de référence en shooting professionnel ultra réaliste.",
        fields=(
            FieldSchema(
                name=REFERENCE_IMAGE_FIELD,
                kind=FieldKind.UPLOAD,
                required=True,
                role=FieldRole.PRIMARY_INPUT,
            ),
            FieldSchema(
                name="Type de shooting",
                kind=FieldKind.DROPDOWN,
                options=("Portrait studio", "Mode éditoriale", "Lifestyle", "Corporate", "Produit"),
                default="Portrait studio",
            ),
            FieldSchema(
                name="Éclairage",
                kind=FieldKind.DROPDOWN,
                options=("Lumière naturelle", "Studio doux", "Clair-obscur", "Golden hour", "Néon"),
            ),
            FieldSchema(
                name="Ambiance",
                kind=FieldKind.CHECKBOX_GROUP,
                options=("Élégante", "Minimaliste", "Chaleureuse", "Dramatique", "Luxueuse", "Urbaine"),
            ),
            FieldSchema(
                name="Arrière-plan",
                kind=FieldKind.DROPDOWN,
                options=("Fond uni", "Intérieur luxueux", "Extérieur urbain", "Nature", "Flou artistique"),
            ),
            FieldSchema(
                name=DESCRIPTION_FIELD,
                kind=FieldKind.TEXTAREA,
                placeholder="Décrivez le rendu souhaité...",
                role=FieldRole.DESCRIPTION,
            ),
            _comments_field(),
        ),
    ),
    ServiceDefinition(
        service_name=ServiceKind.PHOTOSHOP_IMAGE.value,
        description="Créez ou retouchez une image à partir d'une description détaillée.",
        fields=(
            FieldSchema(
                name=OPTIONAL_REFERENCE_IMAGE_FIELD,
                kind=FieldKind.UPLOAD,
                role=FieldRole.PRIMARY_INPUT,
            ),
            FieldSchema(
                name="Style",
                kind=FieldKind.DROPDOWN,
                options=("Cinematic", "Natural", "Illustration", "Peinture numérique", "3D"),
            ),
            FieldSchema(
                name="Format",
                kind=FieldKind.DROPDOWN,
                options=("1:1", "16:9", "9:16", "4:3", "3:4"),
                default="1:1",
            ),
            FieldSchema(
                name="Effets",
                kind=FieldKind.CHECKBOX_GROUP,
                options=("Grain film", "Haute netteté", "Couleurs vives", "Noir et blanc", "Bokeh"),
            ),
            FieldSchema(
                name=DESCRIPTION_FIELD,
                kind=FieldKind.TEXTAREA,
                required=True,
                placeholder="Décrivez l'image à générer...",
                role=FieldRole.DESCRIPTION,
            ),
            _comments_field(),
        ),
    ),
    ServiceDefinition(
        service_name=ServiceKind.VEO_VIDEO.value,
        description="Générez une courte vidéo à partir d'un texte et d'une image optionnelle.",
        fields=(
            FieldSchema(
                name=OPTIONAL_REFERENCE_IMAGE_FIELD,
                kind=FieldKind.UPLOAD,
                role=FieldRole.PRIMARY_INPUT,
            ),
            FieldSchema(
                name="Style",
                kind=FieldKind.DROPDOWN,
                options=("Cinematic", "Natural", "Animation", "Documentaire"),
            ),
            FieldSchema(
                name="Mouvements de caméra",
                kind=FieldKind.CHECKBOX_GROUP,
                options=("Travelling avant", "Panoramique", "Drone", "Plan fixe", "Ralenti"),
            ),
            FieldSchema(
                name="Durée (secondes)",
                kind=FieldKind.NUMBER,
                default=8,
                max=8,
            ),
            FieldSchema(
                name=DESCRIPTION_FIELD,
                kind=FieldKind.TEXTAREA,
                required=True,
                placeholder="Décrivez la scène de la vidéo...",
                role=FieldRole.DESCRIPTION,
            ),
            _comments_field(),
        ),
    ),
)


def load_catalog(path: str | Path) -> list[ServiceDefinition]:
    """
    Load and validate a JSON service catalog.

    The file holds a list of services using the camelCase keys of
    ServiceDefinition.to_form_config().

    Raises:
        ConfigurationError: If the file is unreadable or any service is invalid.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read service catalog {path}: {e}") from e

    try:
        services = _catalog_adapter.validate_python(raw)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid service catalog {path}: {e}") from e

    _check_unique(services)
    logger.info(f"Loaded {len(services)} service(s) from {path}")
    return services


def get_catalog() -> list[ServiceDefinition]:
    """The configured catalog: config.catalog_path if set, built-ins otherwise."""
    config = get_config()
    if config.catalog_path:
        return load_catalog(config.catalog_path)
    return list(BUILTIN_SERVICES)


def find_service(name: str, services: Iterable[ServiceDefinition] | None = None) -> ServiceDefinition:
    """Get a service by name."""
    for service in services if services is not None else get_catalog():
        if service.service_name == name:
            return service
    raise ConfigurationError(f'Service "{name}" is not in the catalog', service_name=name)


def check_registry(services: Iterable[ServiceDefinition], registry: CapabilityRegistry) -> None:
    """Fail if a catalog service has no capability to run it."""
    for service in services:
        if not registry.supports(service.kind):
            raise ConfigurationError(
                f'No generation capability registered for "{service.service_name}"',
                service_name=service.service_name,
            )


def _check_unique(services: list[ServiceDefinition]) -> None:
    seen: set[str] = set()
    for service in services:
        if service.service_name in seen:
            raise ConfigurationError(
                f'Service "{service.service_name}" is declared twice',
                service_name=service.service_name,
            )
        seen.add(service.service_name)
