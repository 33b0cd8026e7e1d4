"""ORM models used by the application infrastructure."""

from .batch import BatchModel, DepartmentModel, ProductModel
from .notification import NotificationModel
from .rule import NotificationRuleModel
from .user import UserModel

__all__ = [
    "BatchModel",
    "DepartmentModel",
    "NotificationModel",
    "NotificationRuleModel",
    "ProductModel",
    "UserModel",
]
