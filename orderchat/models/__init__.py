"""
orderchat – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``import orderchat.models``.
"""

from orderchat.models.user import User                 # noqa: F401
from orderchat.models.order import Order               # noqa: F401
from orderchat.models.message import Message, SenderRole  # noqa: F401
