"""
Infrastructure layer: persistence, event wiring and the HTTP adapter.
"""
