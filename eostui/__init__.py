"""Running EOS commands locally or over SSH, filtering and sorting cluster tables, editing IO shaping policies and cleaning log output."""

__version__ = "0.1.0"