"""Password hashing service using bcrypt.

Passwords (user logins and survey respondent passwords) are only ever stored
as bcrypt hashes. Hashing and verification are CPU-bound and synchronous.
"""

import bcrypt

from survey_api.config import get_settings


class PasswordHasher:
    """
    One-way bcrypt hashing for stored secrets.

    The cost factor comes from ``BCRYPT_ROUNDS``. bcrypt only looks at the
    first 72 bytes of its input, so longer passwords are truncated before
    hashing and verification alike.

    Usage example:
        from survey_api.services.password_hasher import PasswordHasher

        user.password_hash = PasswordHasher.hash_password(payload.password)
        if not PasswordHasher.verify_password(payload.password, user.password_hash):
            raise AuthenticationError("Invalid credentials")
    """

    MAX_PASSWORD_BYTES = 72

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:PasswordHasher.MAX_PASSWORD_BYTES]

    @staticmethod
    def hash_password(password: str) -> str:
        """
        Hash a password with a fresh salt.

        Args:
            password: Plaintext password

        Returns:
            bcrypt hash string (``$2b$...``)

        Example:
            >>> hashed = PasswordHasher.hash_password("s3cret")
            >>> hashed.startswith("$2b$")
            True
        """
        settings = get_settings()
        salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
        return bcrypt.hashpw(PasswordHasher._encode(password), salt).decode("utf-8")

    @staticmethod
    def verify_password(password: str, hashed: str) -> bool:
        """
        Check a plaintext password against a stored hash.

        Args:
            password: Plaintext password supplied by the caller
            hashed: Stored bcrypt hash

        Returns:
            True if the password matches. A missing or malformed hash is
            treated as a mismatch.
        """
        if not password or not hashed:
            return False
        try:
            return bcrypt.checkpw(PasswordHasher._encode(password), hashed.encode("utf-8"))
        except ValueError:
            return False
