from __future__ import annotations

PASSWORD_MIN_LENGTH = 8

PASSWORD_TOO_SHORT = f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
PASSWORD_NO_UPPERCASE = "Password must contain an uppercase letter"
PASSWORD_NO_LOWERCASE = "Password must contain a lowercase letter"
PASSWORD_NO_DIGIT = "Password must contain a number"
EMAIL_INVALID = "Invalid email format"


def password_violations(password: str) -> list[str]:
    """Every strength rule the password breaks, in a stable order."""
    errors: list[str] = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(PASSWORD_TOO_SHORT)
    if not any(c.isupper() for c in password):
        errors.append(PASSWORD_NO_UPPERCASE)
    if not any(c.islower() for c in password):
        errors.append(PASSWORD_NO_LOWERCASE)
    if not any(c.isdigit() for c in password):
        errors.append(PASSWORD_NO_DIGIT)
    return errors


def is_valid_email(email: str) -> bool:
    """
    Exactly one `@`, a non-empty local part, and a dotted domain whose labels
    are non-empty. Whitespace anywhere is rejected.
    """
    if not email or any(c.isspace() for c in email):
        return False
    if email.count("@") != 1:
        return False
    local, domain = email.split("@")
    if not local or "." not in domain:
        return False
    return all(domain.split("."))


def email_violations(email: str) -> list[str]:
    return [] if is_valid_email(email.strip()) else [EMAIL_INVALID]
