from linkshortener.models.link_model import LinkModel, LinkStatus
from linkshortener.models.user_model import UserModel
from linkshortener.models.statistics_model import LinkStatistics


__all__ = [
    'LinkModel',
    'LinkStatus',
    'UserModel',
    'LinkStatistics',
]
