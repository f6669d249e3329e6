"""Decrypted credential handed to a single adapter call."""


def mask_secret(secret: str) -> str:
    """Mask a secret, showing only the first 3 and last 4 characters of long values."""
    if len(secret) > 10:
        return f"{secret[:3]}{'*' * 15}{secret[-4:]}"
    return "*" * len(secret)


class Credential:
    """A plaintext API key scoped to one outbound call.

    The value is only reachable through ``reveal()``; ``repr`` and ``str``
    are masked so the key cannot end up in logs or tracebacks by accident.
    Instances are created by ``EncryptionService.credential_for`` and are
    never written back onto a persisted entity.
    """

    __slots__ = ("_secret",)

    def __init__(self, secret: str):
        if not secret:
            raise ValueError("Credential secret must not be empty")
        self._secret = secret

    def reveal(self) -> str:
        return self._secret

    @property
    def masked(self) -> str:
        return mask_secret(self._secret)

    def __repr__(self) -> str:
        return f"Credential({self.masked!r})"

    __str__ = __repr__
