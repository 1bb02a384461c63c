from saferadius.domain.models.user import User
from saferadius.domain.policy import Role
from saferadius.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def test_base_repository_crud(db_session, make_user):
    repo = SQLAlchemyUserRepository(db_session, User)
    user = make_user(Role.USER, email="crud@example.com")

    assert repo.get_by_id(user.id).email == "crud@example.com"

    updated = repo.update(user, {"role": Role.OWNER.value, "unknown_field": "ignored"})
    assert updated.role == "owner"
    assert not hasattr(updated, "unknown_field")

    assert repo.delete(user.id).id == user.id
    assert repo.get_by_id(user.id) is None
    assert repo.delete(user.id) is None


def test_list_queries_are_purpose_built(db_session, make_user):
    repo = SQLAlchemyUserRepository(db_session, User)
    first = make_user(Role.USER)
    second = make_user(Role.OWNER)

    assert [u.id for u in repo.list_newest_first()] == [second.id, first.id]
    assert repo.count_by_role("owner") == 1
    assert not hasattr(repo, "list")
