"""SQL queries for researches, research likes and saved researches."""

# First two placeholders are the viewer id (is_liked / is_saved).
RESEARCH_SELECT = """
    SELECT
        r.id,
        r.user_id,
        r.title,
        r.description,
        r.created_at,
        u.username,
        u.name,
        (SELECT COUNT(*) FROM campus.research_likes l WHERE l.research_id = r.id) AS like_count,
        EXISTS (
            SELECT 1 FROM campus.research_likes l
            WHERE l.research_id = r.id AND l.user_id = %s
        ) AS is_liked_by_user,
        EXISTS (
            SELECT 1 FROM campus.saved_researches s
            WHERE s.research_id = r.id AND s.user_id = %s
        ) AS is_saved_by_user
    FROM campus.researches r
    INNER JOIN campus.users u ON u.user_id = r.user_id
"""

RESEARCH_CURSOR_CLAUSE = """
      AND (
        %s::INTEGER IS NULL
        OR (r.created_at, r.id) <= (SELECT created_at, id FROM campus.researches WHERE id = %s)
      )
    ORDER BY r.created_at DESC, r.id DESC
    LIMIT %s
"""

LIST_RESEARCHES = (
    RESEARCH_SELECT
    + """
    WHERE (%s::TEXT IS NULL OR r.title ILIKE '%%' || %s || '%%')
"""
    + RESEARCH_CURSOR_CLAUSE
)

LIST_USER_RESEARCHES = (
    RESEARCH_SELECT
    + """
    WHERE r.user_id = %s
"""
    + RESEARCH_CURSOR_CLAUSE
)

LIST_SAVED_RESEARCHES = (
    RESEARCH_SELECT
    + """
    WHERE EXISTS (
        SELECT 1 FROM campus.saved_researches s2
        WHERE s2.research_id = r.id AND s2.user_id = %s
    )
"""
    + RESEARCH_CURSOR_CLAUSE
)

GET_RESEARCH_BY_ID = (
    RESEARCH_SELECT
    + """
    WHERE r.id = %s
"""
)

GET_RESEARCH_OWNER = """
    SELECT user_id FROM campus.researches WHERE id = %s
"""

INSERT_RESEARCH = """
    INSERT INTO campus.researches (user_id, title, description)
    VALUES (%s, %s, %s)
    RETURNING id
"""

DELETE_RESEARCH = """
    DELETE FROM campus.researches WHERE id = %s
"""

GET_RESEARCH_LIKE_INFO = """
    SELECT
        (SELECT COUNT(*) FROM campus.research_likes WHERE research_id = %s) AS likes,
        EXISTS (
            SELECT 1 FROM campus.research_likes WHERE research_id = %s AND user_id = %s
        ) AS is_liked_by_user
"""

INSERT_RESEARCH_LIKE = """
    INSERT INTO campus.research_likes (user_id, research_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, research_id) DO NOTHING
    RETURNING id
"""

DELETE_RESEARCH_LIKE = """
    DELETE FROM campus.research_likes
    WHERE user_id = %s AND research_id = %s
    RETURNING id
"""

GET_SAVED_RESEARCH = """
    SELECT 1 FROM campus.saved_researches WHERE user_id = %s AND research_id = %s
"""

UPSERT_SAVED_RESEARCH = """
    INSERT INTO campus.saved_researches (user_id, research_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, research_id) DO NOTHING
"""

DELETE_SAVED_RESEARCH = """
    DELETE FROM campus.saved_researches WHERE user_id = %s AND research_id = %s
"""
