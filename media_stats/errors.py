"""
Error reasons and exceptions.

Failures of asynchronous backend operations are never raised; they are
delivered to callbacks as a ``(reason, message)`` pair. Reasons from the
backend are passed through unchanged; the registry adds its own below.
Exceptions are reserved for process bootstrap.
"""

# Neither a key pair nor an application secret was supplied
MISSING_CREDENTIALS = "missing_credentials"


class ConfigurationError(RuntimeError):
    """Raised at startup when configuration validation reports errors."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(f"Configuration errors: {self.errors}")
