"""Exception types shared by the FAQ services and routes.

Request-facing errors derive from FaqError and carry the HTTP status the
routes answer with. The remaining errors never reach a client: cache and
translation failures are contained by the services that raise them.
"""


class FaqError(Exception):
    """Base class for errors surfaced to API callers."""

    kind = 'InternalError'
    status_code = 500
    default_message = 'Internal Server Error'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {'error': self.kind, 'message': self.message}


class ValidationError(FaqError):
    """Bad input on a write request."""

    kind = 'ValidationError'
    status_code = 400
    default_message = 'Missing required fields'


class NotFoundError(FaqError):
    """The requested FAQ id does not resolve."""

    kind = 'NotFoundError'
    status_code = 404
    default_message = 'FAQ not found'


class InternalError(FaqError):
    """Durable store failure. The public message never carries details."""

    kind = 'InternalError'
    status_code = 500

    def __init__(self, message: str = None):
        # Always answer with the generic message
        super().__init__(None)


class CacheError(Exception):
    """Any failure talking to the translation cache."""


class ProviderError(Exception):
    """A single call to the translation provider failed."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class TranslationError(Exception):
    """A background translation job did not complete."""

    def __init__(self, faq_id: str, message: str):
        super().__init__(f"Translation of FAQ {faq_id} failed: {message}")
        self.faq_id = faq_id
