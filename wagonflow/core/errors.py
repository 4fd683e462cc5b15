class WagonFlowError(Exception):
    """Base class for launcher errors."""


class EngineError(WagonFlowError, RuntimeError):
    """The analysis engine failed or exited non-zero."""


class EngineNotConfigured(EngineError):
    """Neither an entry point nor an executable is set in preferences."""


class InputSelectionError(WagonFlowError, ValueError):
    """No existing input file was chosen and SQL sourcing is off."""
