"""Exception types shared by the cache layer and the content service."""


class FetchError(Exception):
    """A producer or HTTP fetch failed. The original exception is kept as __cause__."""

    def __init__(self, message: str, key: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.key = key
        self.status_code = status_code


class UnknownSectionError(KeyError):
    def __init__(self, section: str):
        super().__init__(section)
        self.section = section

    def __str__(self) -> str:
        return f"Unknown portfolio section: {self.section}"


class UnknownCategoryError(ValueError):
    def __init__(self, category: str):
        super().__init__(f"Unknown skill category: {category}")
        self.category = category
