# backend/app/routes/__init__.py
"""HTTP routes. Application endpoints live in the versioned ``v1`` package."""
