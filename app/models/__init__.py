from .user import User
from .access_token import AccessToken
from .category import Category
from .tag import Tag
from .post import Post, post_category, post_tag
from .media import Media
from .post_revision import PostRevision
from .comment import Comment
from .post_view import PostView
from .attachment import Attachment

__all__ = [
    "User",
    "AccessToken",
    "Category",
    "Tag",
    "Post",
    "post_category",
    "post_tag",
    "Media",
    "PostRevision",
    "Comment",
    "PostView",
    "Attachment"
]
