from linkshortener.dao.base import LinkBaseDAO, UserBaseDAO
from linkshortener.dao.memory import LinkMemoryDAO, UserMemoryDAO


__all__ = [
    'LinkBaseDAO',
    'UserBaseDAO',
    'LinkMemoryDAO',
    'UserMemoryDAO',
]
