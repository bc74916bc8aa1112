class GuessThatError(Exception):
    """Base class for pipeline errors."""


class ResourceNotFoundError(GuessThatError, FileNotFoundError):
    """A text resource (word list, prompt template) could not be found."""


class PromptTemplateError(GuessThatError):
    """The prompt template is unavailable; fatal for the current request only."""


class CardGenerationError(GuessThatError):
    """The provider failed or returned output that could not be parsed into a batch."""


class CardRequestError(GuessThatError):
    """Generic failure surfaced at the request boundary."""
