"""blocklog - block-periodized strength training tracker."""

__version__ = "0.1.0"
