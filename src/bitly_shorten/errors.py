class BitlyError(Exception):
    """Base class for every failure raised by the Bitly client."""


class AuthError(BitlyError):
    def __init__(self, message: str = "Please specify a valid API access token.") -> None:
        super().__init__(message)


class ValidationError(BitlyError):
    pass


class HttpError(BitlyError):
    def __init__(
        self,
        status_code: int | None,
        body: str = "",
        message: str = "",
        description: str = "",
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.message = message
        self.description = description
        super().__init__(self._summary())

    def _summary(self) -> str:
        status = self.status_code if self.status_code is not None else "no response"
        text = f"Bitly API request failed ({status})"
        if self.message:
            text += f": {self.message}"
        if self.description:
            text += f" - {self.description}"
        return text


class ParseError(BitlyError):
    def __init__(self, message: str, body: str = "", field: str | None = None) -> None:
        self.body = body
        self.field = field
        super().__init__(message)
