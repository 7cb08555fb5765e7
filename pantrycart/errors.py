class PantryCartError(Exception):
    """Base class for errors raised by the extraction pipeline."""


class PageFetchError(PantryCartError):
    """The page behind the submitted URL could not be fetched."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason


class AiNotConfiguredError(PantryCartError):
    pass


class AiTransportError(PantryCartError):
    """The AI endpoint was unreachable or answered with a non-2xx status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AiRateLimitError(AiTransportError):
    """HTTP 429 from the AI endpoint: the quota is used up for now."""

    user_message = "AI quota exceeded. Try again later or check your API plan."

    def __init__(self, message: str = "rate limited"):
        super().__init__(message, status=429)


class ExtractionCancelled(PantryCartError):
    pass
