from linkshortener.services.notifications import NotificationService
from linkshortener.services.user_directory import UserDirectory
from linkshortener.services.link_registry import LinkRegistry
from linkshortener.services.expiry_sweeper import ExpirySweeper, SweepResult


__all__ = [
    'NotificationService',
    'UserDirectory',
    'LinkRegistry',
    'ExpirySweeper',
    'SweepResult',
]
