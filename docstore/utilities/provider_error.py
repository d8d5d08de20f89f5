from http import HTTPStatus


class ProviderError(Exception):
    """ Raised by the data provider. Carries the HTTP status the hosting framework should respond with.
    NOTE: Messages in these errors are shareable with the client. Driver details belong in the logs. """
    code: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str, code: HTTPStatus | None = None) -> None:
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return { "code": int(self.code), "message": self.message }

class BadRequestError(ProviderError):
    """ Malformed or conflicting input. """
    code = HTTPStatus.BAD_REQUEST

class NotFoundError(ProviderError):
    """ The addressed record or file does not exist. Never retried. """
    code = HTTPStatus.NOT_FOUND

class ServerError(ProviderError):
    """ The driver failed, usually after the retry budget was spent. """
    code = HTTPStatus.INTERNAL_SERVER_ERROR

class ConfigurationError(ProviderError):
    """ The provider was configured incorrectly. """
    code = HTTPStatus.INTERNAL_SERVER_ERROR

class ConnectionFailedError(ProviderError):
    """ The initial connection to the database could not be established. """
    code = HTTPStatus.INTERNAL_SERVER_ERROR
