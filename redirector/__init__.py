"""Search redirector that expands bang commands into site-specific search URLs."""

__version__ = "0.5.2"