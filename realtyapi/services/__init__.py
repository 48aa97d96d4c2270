"""
Database-backed services for favorites and lead capture.
"""
from . import favorites, leads

__all__ = ['favorites', 'leads']
