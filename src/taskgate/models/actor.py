"""Actor model - the authenticated identity behind a request."""

from pydantic import BaseModel

from taskgate.models.enums import Role


class Actor(BaseModel):
    """An authenticated user acting on behalf of one organization.

    Identity is (id, role, organization_id); email is descriptive only and is
    ignored by equality and hashing.
    """

    id: str
    email: str
    role: Role
    organization_id: str

    def __hash__(self) -> int:
        return hash((self.id, self.role, self.organization_id))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Actor):
            return False
        return (
            self.id == other.id
            and self.role == other.role
            and self.organization_id == other.organization_id
        )
