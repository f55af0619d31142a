"""Bay Navigator smart assistant: query understanding and program retrieval."""

__version__ = "0.1.0"
