"""
Type configuration models.

The type configuration is supplied from outside (organisation settings, a
JSON file). Only the allowed child types drive the hierarchy rules; colour
and icon are carried along for display.
"""

import json
from pathlib import Path
from typing import Annotated, Any, Dict, List, Mapping, Optional, Union

from pydantic import (
    AfterValidator,
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
)

from decomposer.exceptions import ConfigurationError


def _validate_type_name(value: str) -> str:
    """Type names are non-empty and carry no surrounding whitespace."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Work item type name cannot be empty")
    return stripped


WorkItemTypeName = Annotated[str, AfterValidator(_validate_type_name)]


class WorkItemTypeConfiguration(BaseModel):
    """Configuration for a single work item type.

    allowed_child_types distinguishes two states:
    - None: no rule configured for this type
    - []: configured to allow no children
    """

    model_config = ConfigDict(populate_by_name=True)

    allowed_child_types: Optional[List[WorkItemTypeName]] = Field(
        default=None,
        validation_alias=AliasChoices(
            "allowed_child_types", "allowedChildTypes", "hierarchyRules"
        ),
        serialization_alias="allowedChildTypes",
    )
    display_color: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("display_color", "displayColor", "color"),
        serialization_alias="displayColor",
    )
    icon_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("icon_url", "iconUrl"),
        serialization_alias="iconUrl",
    )

    @property
    def has_rule(self) -> bool:
        """Whether a child rule is configured (possibly empty)."""
        return self.allowed_child_types is not None


class WorkItemConfigurations(BaseModel):
    """Map of type name -> WorkItemTypeConfiguration.

    Keys keep their configured casing; lookups by get()/rule_for() are exact,
    find_type_name() is case-insensitive.
    """

    types: Dict[WorkItemTypeName, WorkItemTypeConfiguration] = Field(default_factory=dict)

    def has(self, type_name: Optional[str]) -> bool:
        """Whether the type has an entry at all."""
        return type_name is not None and type_name in self.types

    def get(self, type_name: Optional[str]) -> Optional[WorkItemTypeConfiguration]:
        """Get the configuration of a type, or None."""
        if type_name is None:
            return None
        return self.types.get(type_name)

    def rule_for(self, type_name: Optional[str]) -> Optional[List[str]]:
        """Get the allowed child types of a type.

        Returns:
            None when no rule is configured (no entry, or an entry without
            allowed child types); otherwise a copy of the configured list,
            which may be empty.
        """
        config = self.get(type_name)
        if config is None or config.allowed_child_types is None:
            return None
        return list(config.allowed_child_types)

    def type_names(self) -> List[str]:
        """All configured type names in configuration order."""
        return list(self.types.keys())

    def find_type_name(self, name: str) -> Optional[str]:
        """Find the configured spelling of a type name, ignoring case."""
        normalized = name.strip().lower()
        for type_name in self.types:
            if type_name.lower() == normalized:
                return type_name
        return None

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Union[WorkItemTypeConfiguration, Mapping[str, Any], List[str], None]],
    ) -> "WorkItemConfigurations":
        """Build configurations from a plain mapping.

        Values may be WorkItemTypeConfiguration instances, dicts with
        allowedChildTypes/displayColor/iconUrl keys, a bare list of child
        type names, or None (type known, no rule).

        Raises:
            ConfigurationError: If the mapping is malformed.
        """
        types: Dict[str, Any] = {}
        for name, value in mapping.items():
            if isinstance(value, WorkItemTypeConfiguration):
                types[name] = value
            elif value is None:
                types[name] = {}
            elif isinstance(value, (list, tuple)):
                types[name] = {"allowed_child_types": list(value)}
            elif isinstance(value, Mapping):
                types[name] = dict(value)
            else:
                raise ConfigurationError(
                    f"Invalid configuration for work item type '{name}': "
                    f"expected a mapping or a list of child types, got {type(value).__name__}."
                )
        try:
            return cls(types=types)
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid work item type configuration: {e}") from e

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "WorkItemConfigurations":
        """Load configurations from a JSON file.

        The file holds either the mapping itself or an object with a
        "work_item_types" key.

        Raises:
            ConfigurationError: If the file is missing or not valid JSON.
        """
        path = Path(path)
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Type configuration file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Type configuration file {path} is not valid JSON: {e}") from e

        if isinstance(data, dict) and isinstance(data.get("work_item_types"), dict):
            data = data["work_item_types"]
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Type configuration file {path} must contain a JSON object."
            )
        return cls.from_mapping(data)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase JSON shape."""
        return {
            name: config.model_dump(mode="json", by_alias=True, exclude_none=True)
            for name, config in self.types.items()
        }


class PathContext(BaseModel):
    """Placement context inherited by every new node from the decomposed item."""

    model_config = ConfigDict(populate_by_name=True)

    area_path: Optional[str] = Field(default=None, alias="areaPath")
    iteration_path: Optional[str] = Field(default=None, alias="iterationPath")
