"""
Custom exceptions for the launchbox supervisor.
"""


class LaunchboxError(Exception):
    """Base class for all launchbox errors."""
    pass


class ConfigurationError(LaunchboxError):
    """A supervised command or setting is missing or invalid."""
    def __init__(self, key: str, value, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration: {key}={value!r} - {reason}")


class ProcessStartError(LaunchboxError):
    """A managed process could not be started."""
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to start process '{name}': {reason}")


class InvalidStateTransition(LaunchboxError):
    """The supervisor was asked to move to a state not reachable from the current one."""
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Supervisor cannot move from {current.name} to {target.name}")
