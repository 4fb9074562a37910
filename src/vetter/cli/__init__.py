"""Command line interface (``vetter``)."""
