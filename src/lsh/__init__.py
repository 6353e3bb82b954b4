"""lsh: a command shell whose pipelines carry typed tables."""

__version__ = "0.1.0"
