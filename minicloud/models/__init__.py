from minicloud.models.user_model import User
from minicloud.models.file_model import FileRecord

__all__ = ["User", "FileRecord"]
