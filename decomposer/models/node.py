"""
Work item node model.

A WorkItemNode is one draft unit of work in the decomposition tree. It owns
its children; parent_id is a lookup-only back reference kept in sync by the
managers.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from decomposer.utils import default_title, generate_temp_id, is_default_title


class WorkItemNode(BaseModel):
    """
    Draft work item.

    Fields:
    - id: Process-local identifier, stable for the node's lifetime
    - title: Display text, "New <Type>" until the user changes it
    - type: Work item type name
    - children: Ordered child nodes (owned)
    - parent_id: Id of the owning parent, None for roots
    - can_promote / can_demote: Derived flags, set only by FlagManager
    - area_path / iteration_path: Placement context inherited from the
      work item being decomposed

    camelCase aliases (parentId, canPromote, areaPath, ...) are accepted on
    input so hierarchies exported by other tools load unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=False)

    id: str = Field(default_factory=generate_temp_id)
    title: str
    type: str
    children: List["WorkItemNode"] = Field(default_factory=list)
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    can_promote: bool = Field(default=False, alias="canPromote")
    can_demote: bool = Field(default=False, alias="canDemote")
    area_path: Optional[str] = Field(default=None, alias="areaPath")
    iteration_path: Optional[str] = Field(default=None, alias="iterationPath")

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Type names must not be blank."""
        if not v or not v.strip():
            raise ValueError("Work item type cannot be empty")
        return v

    def has_default_title(self) -> bool:
        """Whether the title is still the default title for the current type."""
        return is_default_title(self.title, self.type)

    def reset_title_for_type(self, new_type: str) -> None:
        """Set the type and keep a default title in step with it.

        A custom title is left untouched.
        """
        was_default = self.has_default_title()
        self.type = new_type
        if was_default:
            self.title = default_title(new_type)

    def to_dict(self, by_alias: bool = False) -> Dict[str, Any]:
        """Serialize the node and its subtree to plain data."""
        return self.model_dump(mode="json", by_alias=by_alias)


WorkItemNode.model_rebuild()
