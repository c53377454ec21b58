from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class Pong(BaseSchema):
    pong: bool = True


class RouteDoc(BaseSchema):
    method: str
    details: str
    query: List[Dict[str, str]] = Field(default_factory=list)
    examples: List[str] = Field(default_factory=list)

    def render(self) -> Dict[str, Any]:
        return self.model_dump(exclude_defaults=True)
