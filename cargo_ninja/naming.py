"""Canonical identifier form for package names."""


def normalize_name(name: str) -> str:
    """Return ``name`` with every hyphen replaced by an underscore."""
    return name.replace("-", "_")
