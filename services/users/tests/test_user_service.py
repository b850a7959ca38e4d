from decimal import Decimal

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.models import AuditLog, Order, User, UserStatus
from app.repository import audit_log_repository, order_repository, user_repository
from app.repository.errors import DuplicateKeyError, ReferenceNotFoundError
from app.core.security import build_password_context
from app.services.user_service import (
    ServiceError,
    UserHasOrdersError,
    UserNotFoundError,
    UserService,
)


def audit_actions(db, user_id):
    return [(entry.action, entry.state) for entry in audit_log_repository.get_audit_logs_by_user(db, user_id)]


@pytest.mark.integration
class TestRegisterUser:
    def test_registers_valid_candidate(self, db, user_service, stored_candidate):
        result = user_service.register_user(stored_candidate)

        assert result.ok
        user = result.value
        assert isinstance(user, User)
        assert user.id == "1020304050"
        assert user.status is UserStatus.ACTIVE
        assert user.create_date is not None
        assert user.update_date is not None
        assert user_repository.get_user_by_id(db, "1020304050") is not None
        assert audit_actions(db, "1020304050") == [("register_user", "success")]

    def test_defaults_are_applied_on_registration(self, user_service, stored_candidate):
        candidate = dict(stored_candidate)
        for key in ("status", "areaCode", "termsAndConditions"):
            del candidate[key]

        user = user_service.register_user(candidate).value

        assert user.status is UserStatus.INACTIVE
        assert user.area_code == "57"
        assert user.terms_and_conditions is False

    def test_password_is_stored_hashed(self, user_service, stored_candidate):
        user = user_service.register_user(stored_candidate).value

        assert user.password != "s3cret-pass"
        assert user.password.startswith("$pbkdf2-sha256$")
        assert user_service.verify_password(user.id, "s3cret-pass")
        assert not user_service.verify_password(user.id, "wrong")

    def test_default_password_context_hashes_with_bcrypt(self, db, stored_candidate):
        service = UserService(db)

        result = service.register_user(stored_candidate)

        assert result.ok
        assert result.value.password.startswith("$2b$")
        assert build_password_context().verify("s3cret-pass", result.value.password)
        assert service.verify_password(result.value.id, "s3cret-pass")
        assert service.change_password(
            result.value.id, {"password": "n3w-pass", "repeatPassword": "n3w-pass"}
        ).ok
        assert service.verify_password(result.value.id, "n3w-pass")

    def test_user_without_password(self, user_service, stored_candidate):
        candidate = dict(stored_candidate)
        del candidate["password"]

        user = user_service.register_user(candidate).value

        assert user.password is None
        assert not user_service.verify_password(user.id, "anything")

    def test_invalid_candidate_writes_nothing(self, db, user_service, stored_candidate):
        result = user_service.register_user({**stored_candidate, "email": "not-an-email"})

        assert not result.ok
        assert result.fields() == {"email"}
        assert db.query(User).count() == 0
        assert db.query(AuditLog).count() == 0

    def test_same_email_twice_is_a_duplicate_key(self, db, user_service, stored_candidate):
        first = user_service.register_user(stored_candidate)
        second_candidate = {**stored_candidate, "id": "99887766"}
        assert first.ok

        with pytest.raises(DuplicateKeyError) as excinfo:
            user_service.register_user(second_candidate)

        assert excinfo.value.field == "email"
        assert db.query(User).count() == 1
        assert audit_actions(db, "99887766") == [("register_user_conflict", "error")]

    def test_same_id_twice_is_a_duplicate_key(self, db, user_service, stored_candidate):
        user_service.register_user(stored_candidate)

        with pytest.raises(DuplicateKeyError) as excinfo:
            user_service.register_user({**stored_candidate, "email": "otra@gmail.com"})

        assert excinfo.value.field == "id"

    def test_unknown_role_surfaces_reference_error(self, db, user_service, stored_candidate):
        with pytest.raises(ReferenceNotFoundError) as excinfo:
            user_service.register_user({**stored_candidate, "roleId": 77})

        assert excinfo.value.entity == "Role"
        assert db.query(User).count() == 0

    def test_unknown_document_type_surfaces_reference_error(self, user_service, stored_candidate):
        with pytest.raises(ReferenceNotFoundError) as excinfo:
            user_service.register_user({**stored_candidate, "documentTypeId": 77})

        assert excinfo.value.entity == "DocumentType"


@pytest.mark.integration
class TestUpdateUser:
    @pytest.fixture
    def registered(self, user_service, stored_candidate):
        return user_service.register_user(stored_candidate).value

    def test_updates_fields(self, db, user_service, registered):
        result = user_service.update_user(
            registered.id, {"firstName": "Ana María", "phoneNumber": "3019876543"}
        )

        assert result.ok
        stored = user_repository.get_user_by_id(db, registered.id)
        assert stored.first_name == "Ana María"
        assert stored.phone_number == "3019876543"
        assert stored.last_name == "Gómez"
        assert ("update_user", "success") in audit_actions(db, registered.id)

    def test_optional_field_can_be_cleared(self, db, user_service, registered):
        result = user_service.update_user(registered.id, {"address": None})

        assert result.ok
        assert user_repository.get_user_by_id(db, registered.id).address is None

    def test_invalid_change_is_rejected_and_not_stored(self, db, user_service, registered):
        result = user_service.update_user(registered.id, {"email": "broken", "lastName": ""})

        assert result.fields() == {"email", "last_name"}
        db.expire_all()
        stored = user_repository.get_user_by_id(db, registered.id)
        assert stored.email == "ana.gomez@gmail.com"
        assert stored.last_name == "Gómez"

    def test_identifier_is_immutable(self, user_service, registered):
        result = user_service.update_user(registered.id, {"id": "555"})

        assert result.messages_for("id") == ["Identification number cannot be changed"]

    def test_same_identifier_is_accepted(self, user_service, registered):
        assert user_service.update_user(registered.id, {"id": registered.id}).ok

    def test_password_cannot_be_changed_here(self, user_service, registered):
        result = user_service.update_user(registered.id, {"password": "x"})

        assert result.fields() == {"password"}

    def test_email_taken_by_someone_else(self, user_service, stored_candidate, registered):
        user_service.register_user({**stored_candidate, "id": "2", "email": "luis@gmail.com"})

        with pytest.raises(DuplicateKeyError):
            user_service.update_user("2", {"email": "ana.gomez@gmail.com"})

    def test_unknown_user(self, user_service):
        with pytest.raises(UserNotFoundError):
            user_service.update_user("nobody", {"firstName": "X"})


@pytest.mark.integration
class TestPasswordAndStatus:
    @pytest.fixture
    def registered(self, user_service, stored_candidate):
        return user_service.register_user(stored_candidate).value

    def test_change_password(self, db, user_service, registered):
        result = user_service.change_password(
            registered.id, {"password": "n3w-pass", "repeatPassword": "n3w-pass"}
        )

        assert result.ok
        assert user_service.verify_password(registered.id, "n3w-pass")
        assert not user_service.verify_password(registered.id, "s3cret-pass")
        assert ("change_password", "success") in audit_actions(db, registered.id)

    def test_change_password_validation_failure(self, user_service, registered):
        result = user_service.change_password(
            registered.id, {"password": "", "repeatPassword": "x"}
        )

        assert not result.ok
        assert user_service.verify_password(registered.id, "s3cret-pass")

    def test_change_password_mismatch(self, user_service, registered):
        result = user_service.change_password(
            registered.id, {"password": "a", "repeatPassword": "b"}
        )

        assert result.fields() == {"repeat_password"}

    def test_activate_and_deactivate(self, user_service, stored_candidate):
        candidate = dict(stored_candidate)
        del candidate["status"]
        user = user_service.register_user(candidate).value
        assert user.status is UserStatus.INACTIVE

        assert user_service.activate_user(user.id).status is UserStatus.ACTIVE
        assert user_service.deactivate_user(user.id).status is UserStatus.INACTIVE


@pytest.mark.integration
class TestQueriesAndDelete:
    def test_get_user_unknown(self, user_service):
        with pytest.raises(UserNotFoundError) as excinfo:
            user_service.get_user("404")

        assert excinfo.value.user_id == "404"

    def test_find_user_by_email(self, user_service, stored_candidate):
        user_service.register_user(stored_candidate)

        assert user_service.find_user_by_email("ANA.GOMEZ@gmail.com").id == "1020304050"
        assert user_service.find_user_by_email("nadie@gmail.com") is None

    def test_list_users_filters(self, user_service, stored_candidate, role):
        user_service.register_user(stored_candidate)
        user_service.register_user(
            {**stored_candidate, "id": "2", "email": "luis@gmail.com", "status": "INACTIVE"}
        )

        assert len(user_service.list_users()) == 2
        assert [u.id for u in user_service.list_users(status=UserStatus.INACTIVE)] == ["2"]
        assert [u.id for u in user_service.list_users(role_id=role.id, status=UserStatus.ACTIVE)] == [
            "1020304050"
        ]

    def test_list_users_unknown_role(self, user_service):
        with pytest.raises(ReferenceNotFoundError):
            user_service.list_users(role_id=999)

    def test_list_user_orders(self, db, user_service, stored_candidate):
        user = user_service.register_user(stored_candidate).value
        first = order_repository.create_order(db, Order(user_id=user.id, total=Decimal("20.00")))
        second = order_repository.create_order(db, Order(user_id=user.id, total=Decimal("5.00")))
        db.commit()

        orders = user_service.list_user_orders(user.id)

        assert [order.id for order in orders] == [first.id, second.id]

    def test_delete_user(self, db, user_service, stored_candidate):
        user = user_service.register_user(stored_candidate).value

        user_service.delete_user(user.id)

        assert db.query(User).count() == 0
        assert ("delete_user", "success") in audit_actions(db, "1020304050")

    def test_delete_user_with_orders_is_refused(self, db, user_service, stored_candidate):
        user = user_service.register_user(stored_candidate).value
        order_repository.create_order(db, Order(user_id=user.id, total=Decimal("1.00")))
        db.commit()

        with pytest.raises(UserHasOrdersError) as excinfo:
            user_service.delete_user(user.id)

        assert excinfo.value.order_count == 1
        assert user_repository.get_user_by_id(db, user.id) is not None

    def test_database_errors_are_wrapped(self, db, user_service, monkeypatch):
        def boom(db, user_id):
            raise SQLAlchemyError("connection lost")

        monkeypatch.setattr(user_repository, "get_user_by_id", boom)

        with pytest.raises(ServiceError, match="Failed to retrieve user") as excinfo:
            user_service.get_user("1")

        assert isinstance(excinfo.value.__cause__, SQLAlchemyError)
        assert audit_actions(db, "1") == [("get_user_error", "error")]


@pytest.mark.integration
class TestUserResponse:
    def test_serializes_stored_user_with_orders(self, db, user_service, stored_candidate):
        from app.schemas.user import UserResponse

        user = user_service.register_user(stored_candidate).value
        order_repository.create_order(db, Order(user_id=user.id, total=Decimal("12.00")))
        db.commit()
        db.refresh(user)

        payload = UserResponse.model_validate(user).model_dump(by_alias=True, mode="json")

        assert payload["id"] == "1020304050"
        assert payload["firstName"] == "Ana"
        assert payload["documentTypeId"] == user.document_type_id
        assert payload["status"] == "ACTIVE"
        assert "password" not in payload
        assert len(payload["orders"]) == 1
        assert payload["orders"][0]["status"] == "pending"
