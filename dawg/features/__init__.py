"""dawg feature packages."""
