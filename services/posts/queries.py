"""SQL queries for posts, likes, bookmarks and comments."""

# First two placeholders are always the viewer id (for is_liked/is_bookmarked).
POST_SELECT = """
    SELECT
        p.id,
        p.user_id,
        p.content,
        p.image_url,
        p.created_at,
        u.username,
        u.name,
        u.role,
        (SELECT COUNT(*) FROM campus.likes l WHERE l.post_id = p.id) AS like_count,
        (SELECT COUNT(*) FROM campus.comments c WHERE c.post_id = p.id) AS comment_count,
        EXISTS (
            SELECT 1 FROM campus.likes l WHERE l.post_id = p.id AND l.user_id = %s
        ) AS is_liked_by_user,
        EXISTS (
            SELECT 1 FROM campus.bookmarks b WHERE b.post_id = p.id AND b.user_id = %s
        ) AS is_bookmarked_by_user
    FROM campus.posts p
    INNER JOIN campus.users u ON u.user_id = p.user_id
"""

# Cursor row is included; an unknown cursor matches nothing.
POST_CURSOR_CLAUSE = """
      AND (
        %s::INTEGER IS NULL
        OR (p.created_at, p.id) <= (SELECT created_at, id FROM campus.posts WHERE id = %s)
      )
    ORDER BY p.created_at DESC, p.id DESC
    LIMIT %s
"""

GET_FOLLOWING_FEED = (
    POST_SELECT
    + """
    WHERE EXISTS (
        SELECT 1 FROM campus.follows f
        WHERE f.following_id = p.user_id AND f.follower_id = %s
    )
"""
    + POST_CURSOR_CLAUSE
)

GET_USER_POSTS = (
    POST_SELECT
    + """
    WHERE p.user_id = %s
"""
    + POST_CURSOR_CLAUSE
)

GET_BOOKMARKED_POSTS = (
    POST_SELECT
    + """
    WHERE EXISTS (
        SELECT 1 FROM campus.bookmarks b2 WHERE b2.post_id = p.id AND b2.user_id = %s
    )
"""
    + POST_CURSOR_CLAUSE
)

SEARCH_POSTS = (
    POST_SELECT
    + """
    WHERE (
        p.content ILIKE '%%' || %s || '%%'
        OR u.name ILIKE '%%' || %s || '%%'
        OR u.username ILIKE '%%' || %s || '%%'
    )
"""
    + POST_CURSOR_CLAUSE
)

GET_POST_BY_ID = (
    POST_SELECT
    + """
    WHERE p.id = %s
"""
)

GET_POST_OWNER = """
    SELECT user_id FROM campus.posts WHERE id = %s
"""

INSERT_POST = """
    INSERT INTO campus.posts (user_id, content, image_url)
    VALUES (%s, %s, %s)
    RETURNING id
"""

DELETE_POST = """
    DELETE FROM campus.posts WHERE id = %s
"""

GET_POST_LIKE_INFO = """
    SELECT
        (SELECT COUNT(*) FROM campus.likes WHERE post_id = %s) AS likes,
        EXISTS (
            SELECT 1 FROM campus.likes WHERE post_id = %s AND user_id = %s
        ) AS is_liked_by_user
"""

INSERT_POST_LIKE = """
    INSERT INTO campus.likes (user_id, post_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, post_id) DO NOTHING
    RETURNING id
"""

DELETE_POST_LIKE = """
    DELETE FROM campus.likes
    WHERE user_id = %s AND post_id = %s
    RETURNING id
"""

GET_BOOKMARK = """
    SELECT 1 FROM campus.bookmarks WHERE user_id = %s AND post_id = %s
"""

UPSERT_BOOKMARK = """
    INSERT INTO campus.bookmarks (user_id, post_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, post_id) DO NOTHING
"""

DELETE_BOOKMARK = """
    DELETE FROM campus.bookmarks WHERE user_id = %s AND post_id = %s
"""

# Fetched newest first; the service reverses the page.
GET_COMMENTS_PAGE = """
    SELECT
        c.id,
        c.post_id,
        c.user_id,
        c.content,
        c.created_at,
        u.username,
        u.name
    FROM campus.comments c
    INNER JOIN campus.users u ON u.user_id = c.user_id
    WHERE c.post_id = %s
      AND (
        %s::INTEGER IS NULL
        OR (c.created_at, c.id) <= (SELECT created_at, id FROM campus.comments WHERE id = %s)
      )
    ORDER BY c.created_at DESC, c.id DESC
    LIMIT %s
"""

INSERT_COMMENT = """
    INSERT INTO campus.comments (post_id, user_id, content)
    VALUES (%s, %s, %s)
    RETURNING id, created_at
"""

GET_COMMENT = """
    SELECT id, post_id, user_id FROM campus.comments WHERE id = %s
"""

DELETE_COMMENT = """
    DELETE FROM campus.comments WHERE id = %s
"""
