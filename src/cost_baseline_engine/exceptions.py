"""Exceptions raised by the baseline engine and its adapters."""


class BaselineEngineError(Exception):
    """Base class for all baseline engine errors."""


class ConfigurationError(BaselineEngineError):
    """Configuration files could not be read or parsed."""


class UpstreamUnavailableError(BaselineEngineError):
    """The cost data source failed for a subscription."""

    def __init__(self, subscription_id: str, reason: str):
        self.subscription_id = subscription_id
        self.reason = reason
        super().__init__(f"Cost data unavailable for {subscription_id}: {reason}")


class BaselineWriteError(BaselineEngineError):
    """A baseline record could not be persisted."""

    def __init__(self, subscription_id: str, reason: str):
        self.subscription_id = subscription_id
        self.reason = reason
        super().__init__(f"Failed to write baselines for {subscription_id}: {reason}")
