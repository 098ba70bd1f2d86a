class PipelineError(Exception):
    """Base class for dashboard data pipeline failures."""


class FetchError(PipelineError):
    """A year's source file could not be fetched."""

    def __init__(self, year: str, cause: str | BaseException):
        self.year = str(year)
        self.cause = cause
        msg = f"Failed to load {self.year}.csv: {cause}"

        super().__init__(msg)


class GeocodingError(PipelineError):
    """The external geocoding service failed at the transport level."""

    def __init__(self, address: str, reason: str, http_status: int | None = None):
        self.address = address
        self.reason = reason
        self.http_status = http_status
        super().__init__(f"Geocoding failed for '{address}': {reason}")
