"""Custom exceptions for the product price monitor."""


class OpenAIServiceError(Exception):
    """
    Exception raised for OpenAI API failures.

    Attributes:
        message: Error message
        status_code: Optional HTTP status code
    """

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ScrapingError(Exception):
    """
    Exception raised when a product page cannot be loaded.

    Attributes:
        message: Error message
        url: Product page URL
        status_code: HTTP status code
    """

    def __init__(self, message: str, url: str, status_code: int = 500):
        self.message = message
        self.url = url
        self.status_code = status_code
        super().__init__(self.message)


class PersistenceError(Exception):
    """Exception raised when product or price rows cannot be written."""

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)
