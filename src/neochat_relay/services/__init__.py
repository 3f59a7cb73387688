"""Business logic services for the relay."""

from .mailbox import MailboxStore
from .profile_directory import ProfileDirectory

__all__ = [
    "MailboxStore",
    "ProfileDirectory",
]
