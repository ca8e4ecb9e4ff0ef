"""
Application layer: DTOs and application services.
"""
