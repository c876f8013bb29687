"""Errors raised by the awsassume modules.  All of them are fatal."""


class AssumeError(RuntimeError):
    """Base class.  assume.main() turns these into a message and exit(1)."""


class UsageError(AssumeError):
    pass


class ConfigurationError(AssumeError):
    """Profile or tool config missing, unreadable or malformed."""


class ValidationError(AssumeError):
    pass


class InvalidRoleConfiguration(ValidationError):
    pass


class InvalidMfaConfiguration(ValidationError):
    pass


class InteractiveInputError(AssumeError):
    pass


class ExchangeError(AssumeError):
    """The sts assume_role call failed."""
