from flowblog.db import Base  # shared Base

# registration imports; every table must be listed here
from .post import Post
from .comment import Comment
from .abuse_report import AbuseReport

__all__ = ["Base", "Post", "Comment", "AbuseReport"]
