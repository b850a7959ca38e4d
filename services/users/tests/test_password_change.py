import pytest

from app.schemas.user import PasswordChangeRequest
from app.schemas.validation import FieldError
from app.validation.user_validator import PASSWORD_MISMATCH_MESSAGE, validate_password_change


@pytest.mark.unit
class TestValidatePasswordChange:
    def test_matching_passwords_pass(self):
        result = validate_password_change({"password": "n3w-pass", "repeatPassword": "n3w-pass"})

        assert result.ok
        assert isinstance(result.value, PasswordChangeRequest)
        assert result.value.repeat_password == "n3w-pass"

    def test_empty_password_fails(self):
        result = validate_password_change({"password": "", "repeatPassword": "x"})

        assert not result.ok
        assert result.errors == [FieldError(field="password", message="The password is required")]

    def test_empty_repeat_password_fails(self):
        result = validate_password_change({"password": "x", "repeat_password": ""})

        assert result.errors == [
            FieldError(field="repeat_password", message="Repeat password is required")
        ]

    def test_missing_both_reports_both(self):
        result = validate_password_change({})

        assert result.fields() == {"password", "repeat_password"}

    def test_none_candidate_is_treated_as_empty(self):
        assert validate_password_change(None).fields() == {"password", "repeat_password"}

    def test_mismatch_fails_by_default(self):
        result = validate_password_change({"password": "abc", "repeatPassword": "abd"})

        assert result.errors == [
            FieldError(field="repeat_password", message=PASSWORD_MISMATCH_MESSAGE)
        ]

    def test_mismatch_allowed_when_policy_disabled(self):
        result = validate_password_change(
            {"password": "abc", "repeatPassword": "abd"}, require_match=False
        )

        assert result.ok

    def test_mismatch_not_reported_while_a_field_is_missing(self):
        result = validate_password_change({"password": "abc"})

        assert result.messages_for("repeat_password") == ["Repeat password is required"]
        assert PASSWORD_MISMATCH_MESSAGE not in [error.message for error in result.errors]

    def test_whitespace_is_significant(self):
        result = validate_password_change({"password": " pass ", "repeatPassword": "pass"})

        assert result.fields() == {"repeat_password"}

    def test_passwords_hidden_from_repr(self):
        request = validate_password_change(
            {"password": "hidden-value", "repeatPassword": "hidden-value"}
        ).value

        assert "hidden-value" not in repr(request)
