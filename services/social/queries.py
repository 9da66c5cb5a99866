"""SQL queries for follows and follow requests."""

GET_FOLLOW_INFO = """
    SELECT
        (SELECT COUNT(*) FROM campus.follows WHERE following_id = %s) AS followers,
        EXISTS (
            SELECT 1 FROM campus.follows WHERE follower_id = %s AND following_id = %s
        ) AS is_followed_by_user
"""

USER_EXISTS = """
    SELECT 1 FROM campus.users WHERE user_id = %s
"""

INSERT_FOLLOW = """
    INSERT INTO campus.follows (follower_id, following_id)
    VALUES (%s, %s)
    ON CONFLICT (follower_id, following_id) DO NOTHING
    RETURNING follower_id
"""

DELETE_FOLLOW = """
    DELETE FROM campus.follows
    WHERE follower_id = %s AND following_id = %s
    RETURNING follower_id
"""

LIST_FOLLOWERS = """
    SELECT u.user_id, u.username, u.name, u.role, f.created_at AS followed_at
    FROM campus.follows f
    INNER JOIN campus.users u ON u.user_id = f.follower_id
    WHERE f.following_id = %s
    ORDER BY f.created_at DESC
"""

LIST_FOLLOWING = """
    SELECT u.user_id, u.username, u.name, u.role, f.created_at AS followed_at
    FROM campus.follows f
    INNER JOIN campus.users u ON u.user_id = f.following_id
    WHERE f.follower_id = %s
    ORDER BY f.created_at DESC
"""

LIST_SUGGESTIONS = """
    SELECT u.user_id, u.username, u.name, u.role
    FROM campus.users u
    WHERE u.user_id <> %s
      AND u.status = 'ACTIVE'
      AND NOT EXISTS (
        SELECT 1 FROM campus.follows f
        WHERE f.follower_id = %s AND f.following_id = u.user_id
      )
    ORDER BY u.created_at DESC, u.user_id DESC
    LIMIT %s
"""

# A settled request (rejected, cancelled, accepted) may be re-opened.
# No row back means a request is already pending.
UPSERT_FOLLOW_REQUEST = """
    INSERT INTO campus.follow_requests (requester_id, target_id, message, status)
    VALUES (%s, %s, %s, 'PENDING')
    ON CONFLICT (requester_id, target_id) DO UPDATE
    SET status = 'PENDING',
        message = EXCLUDED.message,
        created_at = CURRENT_TIMESTAMP,
        responded_at = NULL
    WHERE campus.follow_requests.status <> 'PENDING'
    RETURNING id
"""

GET_FOLLOW_REQUEST = """
    SELECT id, requester_id, target_id, status, message, created_at, responded_at
    FROM campus.follow_requests
    WHERE id = %s
"""

LOCK_FOLLOW_REQUEST = """
    SELECT id, requester_id, target_id, status
    FROM campus.follow_requests
    WHERE id = %s
    FOR UPDATE
"""

LIST_PENDING_RECEIVED = """
    SELECT
        fr.id,
        fr.requester_id,
        fr.message,
        fr.created_at,
        u.username,
        u.name
    FROM campus.follow_requests fr
    INNER JOIN campus.users u ON u.user_id = fr.requester_id
    WHERE fr.target_id = %s AND fr.status = 'PENDING'
    ORDER BY fr.created_at DESC, fr.id DESC
"""

LIST_PENDING_SENT = """
    SELECT
        fr.id,
        fr.target_id,
        fr.message,
        fr.created_at,
        u.username,
        u.name
    FROM campus.follow_requests fr
    INNER JOIN campus.users u ON u.user_id = fr.target_id
    WHERE fr.requester_id = %s AND fr.status = 'PENDING'
    ORDER BY fr.created_at DESC, fr.id DESC
"""

SET_FOLLOW_REQUEST_STATUS = """
    UPDATE campus.follow_requests
    SET status = %s, responded_at = CURRENT_TIMESTAMP
    WHERE id = %s
"""
