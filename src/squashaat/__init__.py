"""squashaat - acceptance-test driver layer for the squash court booking site."""

__version__ = "1.0.0"
