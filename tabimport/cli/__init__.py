"""Command line interface (``python -m tabimport.cli``); entry point is ``tabimport.cli.__main__.main``."""
