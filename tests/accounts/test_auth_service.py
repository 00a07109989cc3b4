import pytest
from werkzeug.security import generate_password_hash

from school_attendance.accounts.model import TeacherAccount
from school_attendance.accounts.service import AuthService
from school_attendance.core.exceptions import AuthenticationError, ValidationError
from fakes import InMemoryTeachers


@pytest.fixture
def service() -> AuthService:
    return AuthService(
        InMemoryTeachers(
            accounts={
                "T-1": TeacherAccount("T-1", "teacher", generate_password_hash("teacher123"), "Maria Santos", "SCH-1", 11, "Rizal"),
                "T-2": TeacherAccount("T-2", "legacy", "CHANGE_ME", "Jose Rizal", "SCH-1"),
                "T-3": TeacherAccount("T-3", "retired", generate_password_hash("pw"), "Old Timer", "SCH-1", is_active=False),
            }
        )
    )


def test_valid_login_returns_actor_context(service):
    actor = service.authenticate("teacher", "teacher123")

    assert actor.teacher_id == "T-1"
    assert actor.section == "Rizal"
    assert actor.grade_level == 11


@pytest.mark.parametrize(
    "username, password",
    [
        ("teacher", "wrong"),
        ("nobody", "teacher123"),
        ("legacy", "CHANGE_ME"),
        ("retired", "pw"),
    ],
)
def test_bad_credentials(service, username, password):
    with pytest.raises(AuthenticationError, match="Invalid username or password"):
        service.authenticate(username, password)


def test_blank_username_is_a_validation_error(service):
    with pytest.raises(ValidationError):
        service.authenticate("", "x")


def test_actor_context_lookup(service):
    assert service.get_actor_context("T-1").school_id == "SCH-1"
    assert service.get_actor_context("T-3") is None
    assert service.get_actor_context("") is None
