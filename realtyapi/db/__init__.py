"""
Realty database module: async SQLAlchemy engine, sessions and models.
"""
from .models import Base, Favorite, SellerLead, BuyerQuestionnaire
from .session import Database, get_db
from .exceptions import DatabaseError, ConnectionError, IntegrityError

__all__ = [
    'Database', 'get_db', 'Base',
    'Favorite', 'SellerLead', 'BuyerQuestionnaire',
    'DatabaseError', 'ConnectionError', 'IntegrityError',
]
