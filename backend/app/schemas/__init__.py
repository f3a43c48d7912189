# backend/app/schemas/__init__.py
"""
Pydantic schemas for the TutorHub platform.

Request models forbid unknown fields; response models are built from ORM rows.
"""
