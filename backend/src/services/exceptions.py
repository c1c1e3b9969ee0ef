"""Shared exceptions for service layer operations."""


class CredentialsTakenError(Exception):
    """Raised when an email is already registered to another account."""

    def __init__(self, email: str) -> None:
        self.email = email
        super().__init__(f"Email already registered: {email}")


class InvalidCredentialsError(Exception):
    """
    Raised when signin fails.

    Unknown email and wrong password raise the same error so callers cannot
    probe which emails are registered.
    """

    def __init__(self) -> None:
        super().__init__("Credentials incorrect")
