"""Go source generation for cobra command-line tools, long-running operation wrappers and client fragments, from protocol buffer service descriptions."""

__version__ = "0.1.0"