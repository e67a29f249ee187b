"""Exceptions raised while loading and parsing sdef documents."""


class SDEFError(Exception):
    """Base class for sdef_explorer errors."""

    pass


class SDEFParsingError(SDEFError):
    """The document structure cannot be turned into a model."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Invalid SDEF structure: {message}")


class SDEFLoaderError(SDEFError):
    """The document cannot be read from its source."""

    pass
