class DeckInputError(ValueError):
    """The uploaded deck was rejected before any parsing was attempted."""

    status_code = 400


class MissingDeckError(DeckInputError):
    pass


class UnsupportedDeckTypeError(DeckInputError):
    pass


class DeckTooLargeError(DeckInputError):
    status_code = 413


class EmptyDeckError(DeckInputError):
    pass


class DeckExtractionError(RuntimeError):
    """The deck was accepted but its text could not be extracted."""


class AnalysisError(RuntimeError):
    """Base class for every failure inside the analysis core.

    The HTTP layer collapses all of these into one generic message; the
    subclass only matters for logs.
    """

    kind = "analysis_error"


class ServiceError(AnalysisError):
    kind = "service_error"


class ParseMissError(AnalysisError):
    kind = "parse_miss"


class DecodeError(AnalysisError):
    kind = "decode_error"


class SchemaError(DecodeError):
    kind = "schema_error"
