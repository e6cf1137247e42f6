"""PathWatch - record a click path through a site and verify it on replay."""

__version__ = "0.1.0"
