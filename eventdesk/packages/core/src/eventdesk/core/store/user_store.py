"""UserStore SQLite 实现"""

from ..models.user import User
from .collection import SqliteCollectionStore


class SqliteUserStore(SqliteCollectionStore[User]):
    """users 集合 -- 口令列仅供登录比对，不出现在任何对外响应中"""

    model = User
    table = "users"
    columns = ("id", "name", "email", "role", "department", "password")
