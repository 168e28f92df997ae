"""IJSDS journal management packages."""
