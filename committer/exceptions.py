"""Exception hierarchy for committer."""


class CommitterError(Exception):
    """Base exception for all committer errors."""


class ConfigurationError(CommitterError):
    """Provider selection or configuration file problems."""


class TransportError(CommitterError):
    """A backend call failed before yielding a response.

    Covers subprocess exit codes and spawn failures as well as HTTP
    connection, resolution, timeout and status errors.
    """


class MalformedResponseError(CommitterError):
    """A backend answered, but not with something usable."""


class ProviderResponseInvalid(MalformedResponseError):
    """Raw provider text failed the minimum validation checks."""


class GitError(CommitterError):
    """Git command failed."""


class ValidationError(CommitterError):
    """Caller input rejected."""
