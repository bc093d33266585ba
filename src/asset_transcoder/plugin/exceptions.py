"""Plugin system exceptions."""


class PluginError(Exception):
    """Base exception for plugin errors."""


class PluginValidationError(PluginError):
    """Plugin failed validation."""

    def __init__(self, name: str, errors: list[str]) -> None:
        self.name = name
        self.errors = errors
        super().__init__(f"Plugin '{name}' validation failed: {'; '.join(errors)}")


class PluginExecutionError(PluginError):
    """Plugin raised while handling an event."""

    def __init__(self, name: str, event: str, cause: Exception) -> None:
        self.name = name
        self.event = event
        self.cause = cause
        super().__init__(f"Plugin '{name}' failed on {event}: {cause}")
