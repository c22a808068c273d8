from .base import TimeStampedModel

__all__ = ["TimeStampedModel"]
