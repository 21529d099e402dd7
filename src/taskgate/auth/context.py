"""Authentication context helpers."""

from dataclasses import dataclass
from typing import Literal

from taskgate.models import Actor


@dataclass(frozen=True)
class AuthContext:
    """Authentication context for the current request."""

    actor: Actor
    auth_type: Literal["jwt", "insecure_dev"]
