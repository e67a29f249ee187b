"""Typed failures raised while generating code from a merged model."""


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    message_prefix = "Code generation failed"

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"{self.message_prefix}: {value}")


class UnsupportedTypeError(GeneratorError):
    """A base type name that cannot be mapped to a target type."""

    message_prefix = "Unsupported SDEF type"


class InvalidIdentifierError(GeneratorError):
    """A name that cannot be turned into a valid identifier."""

    message_prefix = "Invalid Swift identifier"


class InvalidModelError(GeneratorError):
    """A model that is structurally inconsistent after merging."""

    message_prefix = "Invalid SDEF model"
