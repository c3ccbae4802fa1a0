"""
The VIEW layer holds the Qt widgets and the PyVista rendering.
"""
