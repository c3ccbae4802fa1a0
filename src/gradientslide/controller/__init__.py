"""
The CONTROLLER layer glues the model together into user-level operations
(compile an expression, sample the surface, trace a path). It stays free of
Qt so the whole workflow can be exercised headless.
"""
