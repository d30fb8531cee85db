class SourceError(Exception):
    """An upstream station source could not be used for this request."""


class LiveSourceError(SourceError):
    pass


class InvalidCoordinates(ValueError):
    pass
