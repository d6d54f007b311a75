class JoblyError(Exception):
    """
    Base error for the data-access layer.
    Carries an HTTP-style status so a route layer can map it to a response.
    """

    status = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BadRequestError(JoblyError):
    """The caller supplied invalid or insufficient input."""

    status = 400

    def __init__(self, message: str = "Bad Request") -> None:
        super().__init__(message)


class NotFoundError(JoblyError):
    """No row matched an identifying key."""

    status = 404

    def __init__(self, message: str = "Not Found") -> None:
        super().__init__(message)
