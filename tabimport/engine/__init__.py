"""Import engine: tokenizers, converters, the DataImport aggregate and entry points.

Submodules are imported explicitly; this package imports nothing so that the
models and the engine can reference each other without import cycles.
"""
