"""sitesketch: describe a website, stream the generated code."""

__version__ = "0.1.0"
