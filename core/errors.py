# ============================================================
# ERROR TAXONOMY
# ============================================================


class DailyLevelsError(Exception):
    """Base exception for all daily-levels engine errors."""
    pass


class InvalidArgument(DailyLevelsError, ValueError):
    """
    Raised for caller misconfiguration: negative days prior, a forward
    window outside [0, days_prior], or a non-positive buffer capacity.

    Always raised before any tracker or accumulator state is touched.
    """
    pass


class BarOrderError(InvalidArgument):
    """Raised when a bar arrives with a timestamp older than the previous bar."""
    pass
