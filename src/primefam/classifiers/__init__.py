"""Packaged prime-family classifiers, one per Family member."""
