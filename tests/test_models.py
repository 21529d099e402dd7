"""
Domain model tests.
"""

from taskgate.models import Actor, Role


def test_actor_identity_ignores_email():
    first = Actor(id="a1", email="old@team-a.test", role=Role.ADMIN, organization_id="team-a")
    renamed = first.model_copy(update={"email": "new@team-a.test"})

    assert first == renamed
    assert hash(first) == hash(renamed)
    assert len({first, renamed}) == 1


def test_actor_identity_includes_role_and_organization():
    admin = Actor(id="a1", email="a1@test", role=Role.ADMIN, organization_id="team-a")

    assert admin != admin.model_copy(update={"role": Role.VIEWER})
    assert admin != admin.model_copy(update={"organization_id": "team-b"})
