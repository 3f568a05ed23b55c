"""
Field schema models for generation services.

A ServiceDefinition is a static description of the inputs a
generation service accepts. The models carry no behavior beyond
load-time consistency checks: anything inconsistent is rejected
with a ConfigurationError before a form is ever initialized.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from luxia_studio.errors import ConfigurationError


class FieldKind(str, Enum):
    """Supported input field types."""

    UPLOAD = "upload"
    DROPDOWN = "dropdown"
    CHECKBOX_GROUP = "checkboxGroup"
    TEXTAREA = "textarea"
    NUMBER = "number"


class FieldRole(str, Enum):
    """How the prompt builder treats a field."""

    NONE = "none"
    DESCRIPTION = "description"
    COMMENTS = "comments"
    PRIMARY_INPUT = "primaryInput"


class ServiceKind(str, Enum):
    """Known generation services. The value is the service name."""

    REALISTIC_PHOTO = "Photographie Shooting UltraRéaliste"
    PHOTOSHOP_IMAGE = "Générateur d'Image Photoshop"
    VEO_VIDEO = "Générateur Vidéo VEO IA"


_ROLE_KINDS = {
    FieldRole.DESCRIPTION: FieldKind.TEXTAREA,
    FieldRole.COMMENTS: FieldKind.TEXTAREA,
    FieldRole.PRIMARY_INPUT: FieldKind.UPLOAD,
}

_OPTION_KINDS = (FieldKind.DROPDOWN, FieldKind.CHECKBOX_GROUP)


class FieldSchema(BaseModel):
    """Schema for a single form field."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1, description="Field label and form state key")
    kind: FieldKind = Field(..., description="Input type")
    required: bool = Field(default=False, description="Whether a value must be present")
    options: tuple[str, ...] | None = Field(default=None, description="Choices for dropdown/checkboxGroup")
    default: Any | None = Field(default=None, alias="defaultValue", description="Initial value")
    max: float | None = Field(default=None, description="Upper bound for number fields")
    placeholder: str | None = Field(default=None, description="Hint for textarea fields")
    role: FieldRole = Field(default=FieldRole.NONE, description="Special treatment in prompt assembly")

    @model_validator(mode="after")
    def _check_kind_constraints(self) -> "FieldSchema":
        if self.kind in _OPTION_KINDS:
            if not self.options:
                raise ConfigurationError(f'Field "{self.name}" ({self.kind.value}) needs options')
        elif self.options is not None:
            raise ConfigurationError(f'Field "{self.name}" ({self.kind.value}) does not take options')

        if self.max is not None and self.kind is not FieldKind.NUMBER:
            raise ConfigurationError(f'Field "{self.name}": max is only meaningful for number fields')
        if self.placeholder is not None and self.kind is not FieldKind.TEXTAREA:
            raise ConfigurationError(f'Field "{self.name}": placeholder is only meaningful for textarea fields')

        expected_kind = _ROLE_KINDS.get(self.role)
        if expected_kind is not None and self.kind is not expected_kind:
            raise ConfigurationError(
                f'Field "{self.name}": role {self.role.value} requires a {expected_kind.value} field'
            )

        self._check_default()
        return self

    def _check_default(self) -> None:
        if self.default is None:
            return
        if self.kind is FieldKind.UPLOAD:
            raise ConfigurationError(f'Field "{self.name}": upload fields cannot have a default')
        if self.kind is FieldKind.NUMBER:
            if isinstance(self.default, bool) or not isinstance(self.default, (int, float)):
                raise ConfigurationError(f'Field "{self.name}": default must be a number')
            if self.max is not None and self.default > self.max:
                raise ConfigurationError(f'Field "{self.name}": default exceeds max')
        elif self.kind is FieldKind.DROPDOWN:
            if self.default not in (self.options or ()):
                raise ConfigurationError(f'Field "{self.name}": default must be one of the options')
        elif self.kind is FieldKind.CHECKBOX_GROUP:
            if not isinstance(self.default, (list, tuple)) or any(
                item not in (self.options or ()) for item in self.default
            ):
                raise ConfigurationError(f'Field "{self.name}": default must be a list of options')
        elif not isinstance(self.default, str):
            raise ConfigurationError(f'Field "{self.name}": default must be text')


class ServiceDefinition(BaseModel):
    """
    Declarative description of one generation service.

    The field order is the render order and the prompt order.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    service_name: str = Field(..., alias="serviceName", description="Display name and dispatch key")
    description: str = Field(default="", description="Display-only description")
    fields: tuple[FieldSchema, ...] = Field(..., description="Ordered input fields")

    @model_validator(mode="after")
    def _check_service(self) -> "ServiceDefinition":
        known = {kind.value for kind in ServiceKind}
        if self.service_name not in known:
            raise ConfigurationError(
                f'Unknown service "{self.service_name}". Known services: {", ".join(sorted(known))}',
                service_name=self.service_name,
            )

        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise ConfigurationError(
                    f'Duplicate field name "{field.name}" in service "{self.service_name}"',
                    service_name=self.service_name,
                )
            seen.add(field.name)

        for role in _ROLE_KINDS:
            holders = self.fields_with_role(role)
            if len(holders) > 1:
                raise ConfigurationError(
                    f'Service "{self.service_name}" declares more than one {role.value} field',
                    service_name=self.service_name,
                )
        return self

    @property
    def kind(self) -> ServiceKind:
        return ServiceKind(self.service_name)

    @property
    def field_names(self) -> list[str]:
        return [field.name for field in self.fields]

    def field(self, name: str) -> FieldSchema:
        """Get a field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        raise KeyError(name)

    def fields_with_role(self, role: FieldRole) -> list[FieldSchema]:
        return [field for field in self.fields if field.role is role]

    def _single(self, role: FieldRole) -> FieldSchema | None:
        holders = self.fields_with_role(role)
        return holders[0] if holders else None

    @property
    def description_field(self) -> FieldSchema | None:
        return self._single(FieldRole.DESCRIPTION)

    @property
    def comments_field(self) -> FieldSchema | None:
        return self._single(FieldRole.COMMENTS)

    @property
    def primary_input_field(self) -> FieldSchema | None:
        return self._single(FieldRole.PRIMARY_INPUT)

    @property
    def upload_fields(self) -> list[FieldSchema]:
        return [field for field in self.fields if field.kind is FieldKind.UPLOAD]

    def to_form_config(self) -> dict[str, Any]:
        """Export the service as a plain dict for clients and MCP tools."""
        return {
            "serviceName": self.service_name,
            "description": self.description,
            "fields": [
                field.model_dump(mode="json", by_alias=True, exclude_none=True)
                for field in self.fields
            ],
        }
