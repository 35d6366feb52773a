"""cargo-ninja: turn a resolved Cargo lock graph into a ninja build plan."""

__version__ = "0.1.0"
