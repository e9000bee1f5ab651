"""Exception types raised by gitstat."""


class GitStatError(Exception):
    """Base class for every error the CLI reports and exits on."""


class InputValidationError(GitStatError):
    """Bad arguments: malformed dates or an end date before the start date."""


class RepositoryAccessError(GitStatError):
    """The path does not exist or is not a git repository."""


class HistoryRetrievalError(GitStatError):
    """Walking commits or computing a commit's diff stats failed."""


class OutputError(GitStatError):
    """The report could not be written to the requested file."""
