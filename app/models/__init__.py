from app.models.base import IDModel, TimestampModel
from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.feedback import Feedback
from app.models.feedback_message import FeedbackMessage
from app.models.notification import Notification
from app.models.system_settings import SystemSettings

__all__ = [
    'IDModel',
    'TimestampModel',
    'User',
    'RefreshToken',
    'Feedback',
    'FeedbackMessage',
    'Notification',
    'SystemSettings',
]
