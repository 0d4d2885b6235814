"""Error kinds raised by the sentinel components."""


class SentinelError(Exception):
    """Base class for every error the sentinel reports."""


class ConfigError(SentinelError):
    """Missing or invalid configuration; fatal before the pipeline starts."""


class FetchError(SentinelError):
    """The camera could not be reached or refused the credentials."""


class DetectionError(SentinelError):
    """The object localization backend failed."""


class CooldownLockedError(SentinelError):
    """Another run currently holds the cooldown state lock."""
