class TripError(Exception):
    """Base class for errors raised by the persistence layer."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(TripError):
    status_code = 404


class InvalidReference(TripError):
    """A record points at a hole, player or team that does not fit it."""

    status_code = 400


class Conflict(TripError):
    status_code = 409
