"""
Comment Threading Engine

Maintains the parent/child reply tree of comments scoped to one post.

Public reads are lazy: top-level comments and the replies of one comment
are separate queries, one round trip per nesting level. Moderation can
load a whole tree at once with `fetch_subtree`.

Parentage is always validated: the parent must exist, belong to the same
post, not be the comment itself or one of its descendants, and stay within
`settings.max_comment_depth` levels.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from tortoise.functions import Count
from tortoise.transactions import in_transaction

from ..config import settings
from ..core.errors import NotFound, ValidationFailed
from ..models.blog_post import BlogPost
from ..models.comment import Comment

logger = logging.getLogger(__name__)

# Newest first; id breaks ties between rows sharing a timestamp
NEWEST_FIRST = ("-created_at", "-id")


@dataclass
class CommentNode:
    """One comment plus its (already loaded) replies."""
    comment: Comment
    replies: List["CommentNode"] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = comment_to_dict(self.comment, reply_count=len(self.replies))
        data["replies"] = [r.to_dict() for r in self.replies]
        return data


def comment_to_dict(c: Comment, reply_count: Optional[int] = None) -> dict:
    data = {
        "id": c.id,
        "postId": c.post_id,
        "parentId": c.parent_id,
        "authorName": c.author_name,
        "content": c.content,
        "isApproved": c.is_approved,
        "createdAt": c.created_at.isoformat() if c.created_at else None,
    }
    if reply_count is not None:
        data["replyCount"] = reply_count
    return data


def visible_comments(post_id: int):
    """Base queryset for everything readers may see on a post."""
    return Comment.filter(post_id=post_id, is_approved=True)


async def list_top_level(post_id: int) -> List[Comment]:
    return await visible_comments(post_id).filter(parent_id__isnull=True).order_by(*NEWEST_FIRST)


async def list_replies(post_id: int, comment_id: int) -> List[Comment]:
    """
    Direct replies of one comment. Raises NotFound when the comment is not
    a visible comment on this post, so a stale, hidden or foreign id never
    yields a silent empty list.
    """
    if not await visible_comments(post_id).filter(id=comment_id).exists():
        raise NotFound("COMMENT_NOT_FOUND", "Comment not found on this post")
    return await visible_comments(post_id).filter(parent_id=comment_id).order_by(*NEWEST_FIRST)


async def reply_counts(post_id: int, comment_ids: Iterable[int]) -> Dict[int, int]:
    """Visible direct-reply count per comment id, one grouped query."""
    ids = list(comment_ids)
    if not ids:
        return {}
    rows = (
        await visible_comments(post_id)
        .filter(parent_id__in=ids)
        .annotate(reply_count=Count("id"))
        .group_by("parent_id")
        .values("parent_id", "reply_count")
    )
    counts = {cid: 0 for cid in ids}
    for row in rows:
        counts[row["parent_id"]] = row["reply_count"]
    return counts


async def with_reply_counts(post_id: int, comments: List[Comment]) -> List[dict]:
    counts = await reply_counts(post_id, [c.id for c in comments])
    return [comment_to_dict(c, reply_count=counts.get(c.id, 0)) for c in comments]


async def _depth_of(comment_id: Optional[int]) -> int:
    """Number of ancestors above a new child of `comment_id` (0 = top level)."""
    depth = 0
    current = comment_id
    while current is not None:
        depth += 1
        if depth > settings.max_comment_depth:
            break
        row = await Comment.filter(id=current).values_list("parent_id", flat=True)
        current = row[0] if row else None
    return depth


async def _height_below(post_id: int, comment_id: int) -> int:
    """Levels of replies under a comment (0 for a leaf), from one query."""
    children: Dict[int, List[int]] = {}
    for cid, pid in await Comment.filter(post_id=post_id).values_list("id", "parent_id"):
        if pid is not None:
            children.setdefault(pid, []).append(cid)

    height = 0
    level = children.get(comment_id, [])
    seen = {comment_id}
    while level:
        height += 1
        seen.update(level)
        level = [c for cid in level for c in children.get(cid, []) if c not in seen]
    return height


async def _validate_parent(
    post_id: int,
    parent_id: int,
    comment_id: Optional[int] = None,
    visible_only: bool = False,
) -> Comment:
    parent = await Comment.get_or_none(id=parent_id)
    if parent is None or (visible_only and not parent.is_approved):
        raise ValidationFailed("PARENT_NOT_FOUND", "Parent comment does not exist")
    if parent.post_id != post_id:
        raise ValidationFailed("PARENT_POST_MISMATCH", "Parent comment belongs to a different post")

    if comment_id is not None:
        # Walk up from the new parent; meeting the comment itself means a cycle
        current: Optional[int] = parent.id
        seen = set()
        while current is not None and current not in seen:
            if current == comment_id:
                raise ValidationFailed("COMMENT_CYCLE", "A comment cannot be nested under itself")
            seen.add(current)
            row = await Comment.filter(id=current).values_list("parent_id", flat=True)
            current = row[0] if row else None

    # A moved comment brings its replies along
    height = await _height_below(post_id, comment_id) if comment_id is not None else 0
    if await _depth_of(parent.id) + height > settings.max_comment_depth:
        raise ValidationFailed("COMMENT_TOO_DEEP", "Reply thread is nested too deeply")
    return parent


async def create_comment(
    post_id: int,
    author_name: str,
    content: str,
    parent_id: Optional[int] = None,
) -> Comment:
    """
    Create a comment (parent_id=None) or a reply. Visibility of the post to
    the caller is checked by the route. Hidden comments cannot be replied to.
    """
    if not await BlogPost.filter(id=post_id).exists():
        raise NotFound("POST_NOT_FOUND", "Blog post not found")
    if parent_id is not None:
        await _validate_parent(post_id, parent_id, visible_only=True)
    comment = await Comment.create(
        post_id=post_id,
        parent_id=parent_id,
        author_name=author_name,
        content=content,
    )
    logger.info("Comment %s created on post %s (parent=%s)", comment.id, post_id, parent_id)
    return comment


_UNSET = object()


async def update_comment(
    comment_id: int,
    *,
    author_name: Optional[str] = None,
    content: Optional[str] = None,
    is_approved: Optional[bool] = None,
    parent_id=_UNSET,
) -> Comment:
    """Moderation update. parent_id=None moves the comment to top level."""
    comment = await Comment.get_or_none(id=comment_id)
    if comment is None:
        raise NotFound("COMMENT_NOT_FOUND", "Comment not found")

    if author_name is not None:
        comment.author_name = author_name
    if content is not None:
        comment.content = content
    if is_approved is not None:
        comment.is_approved = is_approved
    if parent_id is not _UNSET and parent_id != comment.parent_id:
        if parent_id is not None:
            await _validate_parent(comment.post_id, parent_id, comment_id=comment.id)
        comment.parent_id = parent_id

    await comment.save()
    logger.info("Comment %s updated by moderation", comment.id)
    return comment


async def delete_comment(comment_id: int) -> None:
    """
    Delete a comment. Its direct replies move up to the deleted comment's
    parent (or to top level), so no reply is ever left pointing at a
    missing row.
    """
    comment = await Comment.get_or_none(id=comment_id)
    if comment is None:
        raise NotFound("COMMENT_NOT_FOUND", "Comment not found")

    async with in_transaction():
        moved = await Comment.filter(parent_id=comment.id).update(parent_id=comment.parent_id)
        await comment.delete()
    logger.info("Comment %s deleted, %s replies reattached to %s", comment_id, moved, comment.parent_id)


async def fetch_subtree(post_id: int, root_id: Optional[int] = None, include_hidden: bool = True) -> List[CommentNode]:
    """
    Load a post's comments in one query and assemble the tree in memory.

    root_id=None returns every top-level thread; otherwise the single tree
    rooted at root_id. Hidden (unapproved) comments are included by default
    because this is the moderation view.
    """
    qs = Comment.filter(post_id=post_id)
    if not include_hidden:
        qs = qs.filter(is_approved=True)
    rows = await qs.order_by(*NEWEST_FIRST)

    nodes = {c.id: CommentNode(c) for c in rows}
    roots: List[CommentNode] = []
    for c in rows:
        node = nodes[c.id]
        parent = nodes.get(c.parent_id) if c.parent_id is not None else None
        if parent is not None:
            parent.replies.append(node)
        elif c.parent_id is None:
            roots.append(node)
        else:
            # Parent filtered out (hidden) or missing: show the branch at top level
            roots.append(node)

    if root_id is None:
        return roots
    if root_id not in nodes:
        raise NotFound("COMMENT_NOT_FOUND", "Comment not found on this post")
    return [nodes[root_id]]
