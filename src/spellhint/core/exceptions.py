"""Custom exceptions for spellhint."""


class SpellHintError(Exception):
    """Base exception for all spellhint errors."""


class ConfigError(SpellHintError):
    """Configuration error."""


class SchemaError(SpellHintError):
    """Metadata schema missing or malformed."""


class DocumentError(SpellHintError):
    """Document could not be read."""
