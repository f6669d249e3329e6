"""Encryption service for securing API keys."""

import sys
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken

from provider_gateway.config import settings
from provider_gateway.models.provider import Provider
from provider_gateway.providers.credentials import Credential
from provider_gateway.providers.errors import CredentialError


class EncryptionService:
    """Service for encrypting and decrypting sensitive data."""

    def __init__(self, key: Optional[str] = None):
        """Initialize encryption service.

        Args:
            key: Fernet key to use; defaults to ``settings.encryption_key``.
        """
        self._key = key or settings.encryption_key
        self._validate_encryption_key()
        self._fernet = Fernet(self._key.encode())

    def _validate_encryption_key(self) -> None:
        """Validate that encryption key is properly configured.

        Raises:
            SystemExit: If encryption key is missing or invalid.
        """
        if not self._key:
            print("ERROR: ENCRYPTION_KEY environment variable is not set.", file=sys.stderr)
            print("The service cannot start without a valid encryption key.", file=sys.stderr)
            print("Generate a key with: python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\"", file=sys.stderr)
            sys.exit(1)

        try:
            Fernet(self._key.encode())
        except (ValueError, TypeError) as e:
            print(f"ERROR: Invalid ENCRYPTION_KEY format: {e}", file=sys.stderr)
            print("Generate a valid key with: python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\"", file=sys.stderr)
            sys.exit(1)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt plaintext string.

        Args:
            plaintext: The string to encrypt.

        Returns:
            The encrypted string (base64 encoded).
        """
        return self._fernet.encrypt(plaintext.encode()).decode()

    def decrypt(self, ciphertext: str) -> str:
        """Decrypt ciphertext string.

        Args:
            ciphertext: The encrypted string (base64 encoded).

        Returns:
            The decrypted plaintext string.

        Raises:
            InvalidToken: If the ciphertext is invalid or corrupted.
        """
        return self._fernet.decrypt(ciphertext.encode()).decode()

    def credential_for(self, provider: Provider) -> Credential:
        """Decrypt a provider's stored API key into a call-scoped credential.

        The provider row is left untouched; the returned value must not be
        cached or written back.

        Raises:
            CredentialError: If the stored key cannot be decrypted.
        """
        try:
            return Credential(self.decrypt(provider.api_key_encrypted))
        except (InvalidToken, ValueError) as e:
            raise CredentialError(
                "Stored API key could not be decrypted; re-enter the key",
                provider.provider_name,
            ) from e
