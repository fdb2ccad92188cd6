"""Exception types shared across vocabart."""


class VocabartError(Exception):
    """Base error for vocabart."""
    pass


class PreconditionError(VocabartError):
    """A required input (credential, cards) is missing. Nothing was attempted."""
    pass


class EmptyDeckError(PreconditionError):
    """Generation or export was requested with no cards in the store."""
    pass


class TransportFailure(VocabartError):
    """One image request attempt failed (bad status or malformed payload)."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class CardNotFoundError(VocabartError, KeyError):
    """No card in the store carries the requested term."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else "card not found"
