"""Tests for registration field validators."""

import pytest

from todolist.core.modules.user.validators import validate_email, validate_name, validate_password
from todolist.errors import ValidationError


class TestValidateName:
    """Tests for display name validation."""

    @pytest.mark.parametrize("name", ["Ann", "Jo", "  Jo  ", "x" * 100])
    def test_valid_names_accepted(self, name):
        validate_name(name)

    @pytest.mark.parametrize("name", ["A", "  A  ", "x" * 101])
    def test_length_out_of_range_raises_error(self, name):
        with pytest.raises(ValidationError, match="between 2 and 100"):
            validate_name(name)


class TestValidateEmail:
    """Tests for email validation."""

    @pytest.mark.parametrize("email", ["a@x.com", "Ann.Smith+todo@mail.example.org"])
    def test_valid_emails_accepted(self, email):
        validate_email(email)

    @pytest.mark.parametrize("email", ["a", "a@x", "@x.com", "a b@x.com", "a@@x.com"])
    def test_invalid_emails_raise_error(self, email):
        with pytest.raises(ValidationError, match="Invalid email"):
            validate_email(email)

    def test_overlong_email_raises_error(self):
        with pytest.raises(ValidationError):
            validate_email("a" * 250 + "@x.com")


class TestValidatePassword:
    """Tests for password validation."""

    def test_valid_password_accepted(self):
        validate_password("secret1")

    def test_short_password_raises_error(self):
        with pytest.raises(ValidationError, match="at least 6"):
            validate_password("abc")

    def test_whitespace_raises_error(self):
        with pytest.raises(ValidationError, match="whitespace"):
            validate_password("secret 1")

    def test_password_over_bcrypt_limit_raises_error(self):
        """Test that passwords longer than 72 bytes in UTF-8 are rejected."""
        with pytest.raises(ValidationError, match="72 bytes"):
            validate_password("ä" * 37)
