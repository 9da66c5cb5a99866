"""SQL queries for authentication and user management."""

USER_COLUMNS = """
        user_id,
        username,
        email,
        password_hash,
        name,
        bio,
        role,
        status,
        created_at,
        updated_at,
        last_login
"""

GET_USER_BY_USERNAME = f"""
    SELECT {USER_COLUMNS}
    FROM campus.users
    WHERE username = %s
"""

GET_USER_BY_EMAIL = f"""
    SELECT {USER_COLUMNS}
    FROM campus.users
    WHERE email = %s
"""

GET_USER_BY_ID = f"""
    SELECT {USER_COLUMNS}
    FROM campus.users
    WHERE user_id = %s
"""

GET_PUBLIC_PROFILE_BY_USERNAME = """
    SELECT
        u.user_id,
        u.username,
        u.name,
        u.bio,
        u.role,
        u.created_at,
        (SELECT COUNT(*) FROM campus.follows f WHERE f.following_id = u.user_id) AS followers,
        (SELECT COUNT(*) FROM campus.follows f WHERE f.follower_id = u.user_id) AS following,
        (SELECT COUNT(*) FROM campus.posts p WHERE p.user_id = u.user_id) AS posts,
        EXISTS (
            SELECT 1 FROM campus.follows f
            WHERE f.following_id = u.user_id AND f.follower_id = %s
        ) AS is_followed_by_user
    FROM campus.users u
    WHERE u.username = %s
"""

LIST_USERS = """
    SELECT user_id, username, name, email, role, status, created_at
    FROM campus.users
    ORDER BY created_at DESC, user_id DESC
"""

INSERT_USER = """
    INSERT INTO campus.users (
        username, email, password_hash, name, role, status, created_at, updated_at
    )
    VALUES (%s, %s, %s, %s, %s, %s, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP)
    RETURNING user_id
"""

UPDATE_USER_LAST_LOGIN = """
    UPDATE campus.users
    SET last_login = CURRENT_TIMESTAMP, updated_at = CURRENT_TIMESTAMP
    WHERE user_id = %s
"""

UPDATE_USER_PASSWORD = """
    UPDATE campus.users
    SET password_hash = %s, updated_at = CURRENT_TIMESTAMP
    WHERE user_id = %s
"""

UPDATE_USER_PROFILE = """
    UPDATE campus.users
    SET name = COALESCE(%s, name),
        bio = COALESCE(%s, bio),
        updated_at = CURRENT_TIMESTAMP
    WHERE user_id = %s
    RETURNING user_id
"""

UPDATE_USER_ROLE = """
    UPDATE campus.users
    SET role = %s, updated_at = CURRENT_TIMESTAMP
    WHERE user_id = %s
    RETURNING user_id
"""

UPDATE_USER_STATUS = """
    UPDATE campus.users
    SET status = %s, updated_at = CURRENT_TIMESTAMP
    WHERE user_id = %s
    RETURNING user_id
"""
