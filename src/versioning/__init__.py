"""Import declaration parsing and version resolution."""
