"""spellhint — schema-driven autocompletion for spell configuration files."""

__version__ = "0.1.0"
