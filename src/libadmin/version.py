"""Version information for :mod:`libadmin`."""

VERSION = "0.1.0"
