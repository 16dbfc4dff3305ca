from enum import Enum
import sqlalchemy as sa
from sqlalchemy import Column


class UserRole(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class AuthorType(str, Enum):
    USER = 'user'
    ADMIN = 'admin'


class FeedbackType(str, Enum):
    BUG = 'bug'
    FEATURE = 'feature'
    IMPROVEMENT = 'improvement'
    OTHER = 'other'


class FeedbackSeverity(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


class FeedbackStatus(str, Enum):
    NEW = 'new'
    IN_PROGRESS = 'in_progress'
    RESOLVED = 'resolved'
    CLOSED = 'closed'


class FeedbackPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'


class NotificationType(str, Enum):
    SYSTEM = 'system'
    FEEDBACK_CREATED = 'feedback_created'
    FEEDBACK_MESSAGE = 'feedback_message'


def enum_column(enum_cls: type[Enum], name: str, nullable: bool = False) -> Column:
    return Column(
        sa.Enum(
            enum_cls,
            values_callable=lambda enum: [item.value for item in enum],
            name=name,
        ),
        nullable=nullable,
    )
