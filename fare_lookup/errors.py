from __future__ import annotations


class FareLookupError(Exception):
    """Base class for every error raised by fare_lookup."""


class FareDataError(FareLookupError):
    """The fare sheet could not be turned into a usable matrix."""


class EmptyDataError(FareDataError):
    pass


class ShapeMismatchError(FareDataError):
    pass


class UnknownStopError(FareLookupError, LookupError):
    def __init__(self, names: list[str]):
        self.names = list(names)
        super().__init__(f"Unknown stop name(s): {', '.join(repr(n) for n in self.names)}")


class MissingParameterError(FareLookupError, ValueError):
    def __init__(self, params: list[str]):
        self.params = list(params)
        super().__init__(f"Missing required parameter(s): {', '.join(self.params)}")
