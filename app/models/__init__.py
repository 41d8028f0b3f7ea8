"""ORM models; importing this package registers every table on Base."""

from app.models.cafe import Cafe  # noqa: F401
from app.models.like import Like  # noqa: F401
from app.models.review import Review  # noqa: F401
from app.models.user import User  # noqa: F401
