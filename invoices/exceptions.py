# invoices/exceptions.py


class RentGenerationError(Exception):
    """Base class for rent generation failures."""


class ConfigurationError(RentGenerationError):
    """Generation settings are missing or invalid."""


class DataQualityError(RentGenerationError):
    """A rental unit is missing data the generator needs."""


class BatchGenerationError(RentGenerationError):
    """The batch loop itself failed; ``result`` holds what was done before."""

    def __init__(self, message, result=None):
        super().__init__(message)
        self.result = result
