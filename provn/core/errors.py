# provn/core/errors.py


class ProvnError(Exception):
    """Base class for every error raised by provn."""

    kind = "general"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.label}: {self.message}"

    @property
    def label(self) -> str:
        return "Error"


class SerializationError(ProvnError):
    """Canonical form or interchange JSON could not be built or parsed."""

    kind = "serialization"

    @property
    def label(self) -> str:
        return "Serialization failed"


class SignatureError(ProvnError):
    """The Ed25519 primitive rejected a signing or verification input."""

    kind = "signature"

    @property
    def label(self) -> str:
        return "Invalid signature"


class KeyFormatError(ProvnError):
    """Key or signature text is not hex, or decodes to the wrong length."""

    kind = "key"

    @property
    def label(self) -> str:
        return "Key format error"
