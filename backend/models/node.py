# Node tree models.
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Node(BaseModel):
    """A tree node. Serialized with the client's camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    parent_id: str = Field(alias="parentId")
    children: List["Node"] = Field(default_factory=list)


class NodeCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    parent_id: str = Field(alias="parentId")
    children: List[Node] = Field(default_factory=list)


Node.model_rebuild()
