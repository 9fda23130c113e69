"""Base domain exception."""


class DomainException(Exception):
    """
    Base for every error the gateway reports to its callers.

    `code` is the stable, machine-readable identifier returned as the
    `error` field of API error bodies; `message` is for humans.
    """

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"
