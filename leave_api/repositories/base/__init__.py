"""
Base repositories package.
"""

from leave_api.repositories.base.base_repository import BaseRepository, ModelType

__all__ = ["BaseRepository", "ModelType"]
