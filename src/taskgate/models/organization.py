"""Organization model - nodes of the tenant forest."""

from typing import Optional

from pydantic import BaseModel


class Organization(BaseModel):
    """An organization; parent_id links it to at most one parent."""

    id: str
    name: str
    parent_id: Optional[str] = None

    def is_root(self) -> bool:
        return self.parent_id is None
