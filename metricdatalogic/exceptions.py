class MDLError(Exception): ...


class SeriesError(MDLError): ...


class ConsolidationError(MDLError): ...


class UnknownConsolidationError(ConsolidationError):
    """No reducer is registered for a series' consolidation function."""

    def __init__(self, series_name: str, func_name: str):
        self.series_name = series_name
        self.func_name = func_name
        super().__init__(
            f"Unknown consolidation function {func_name!r} for series {series_name!r}"
        )


class EncodingError(MDLError): ...


class FormatError(MDLError): ...


def require(condition: bool, message: str, exc: type[MDLError] = MDLError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
