import re

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9+_.-]+@(.+)")
MIN_PASSWORD_LENGTH = 8

# ASCII only: "²" or "Ä" do not count
DIGIT = re.compile(r"[0-9]")
UPPERCASE = re.compile(r"[A-Z]")
LOWERCASE = re.compile(r"[a-z]")


def is_valid_email(value: str) -> bool:
    return value is not None and EMAIL_PATTERN.fullmatch(value) is not None


def password_problems(value: str) -> list[str]:
    errors = []
    if value is None:
        value = ""
    if len(value) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not DIGIT.search(value):
        errors.append("Password must contain at least one digit")
    if not UPPERCASE.search(value):
        errors.append("Password must contain at least one uppercase letter")
    if not LOWERCASE.search(value):
        errors.append("Password must contain at least one lowercase letter")
    return errors
