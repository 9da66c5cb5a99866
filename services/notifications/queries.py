"""SQL queries for in-app notifications."""

NOTIFICATION_COLUMNS = """
        n.id,
        n.recipient_id,
        n.issuer_id,
        n.type,
        n.post_id,
        n.job_id,
        n.course_id,
        n.research_id,
        n.title,
        n.message,
        n.read,
        n.created_at,
        iu.username AS issuer_username,
        iu.name AS issuer_name,
        p.content AS post_content,
        j.title AS job_title,
        c.title AS course_title,
        c.code AS course_code,
        r.title AS research_title
"""

INSERT_NOTIFICATION = """
    INSERT INTO campus.notifications (
        recipient_id, issuer_id, type, post_id, job_id, course_id, title, message,
        research_id, read
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, FALSE)
    RETURNING id
"""

# Cursor row is included; ordering ties are broken by id.
GET_NOTIFICATIONS_PAGE = f"""
    SELECT {NOTIFICATION_COLUMNS}
    FROM campus.notifications n
    INNER JOIN campus.users iu ON iu.user_id = n.issuer_id
    LEFT JOIN campus.posts p ON p.id = n.post_id
    LEFT JOIN campus.jobs j ON j.id = n.job_id
    LEFT JOIN campus.courses c ON c.id = n.course_id
    LEFT JOIN campus.researches r ON r.id = n.research_id
    WHERE n.recipient_id = %s
      AND (
        %s::INTEGER IS NULL
        OR (n.created_at, n.id) <= (
            SELECT created_at, id FROM campus.notifications
            WHERE id = %s AND recipient_id = n.recipient_id
        )
      )
    ORDER BY n.created_at DESC, n.id DESC
    LIMIT %s
"""

GET_NOTIFICATION_BY_ID = """
    SELECT id, recipient_id, issuer_id, type, read, created_at
    FROM campus.notifications
    WHERE id = %s
"""

COUNT_UNREAD = """
    SELECT COUNT(*)
    FROM campus.notifications
    WHERE recipient_id = %s AND read = FALSE
"""

MARK_READ = """
    UPDATE campus.notifications
    SET read = TRUE
    WHERE id = %s AND recipient_id = %s
    RETURNING id
"""

MARK_ALL_READ = """
    UPDATE campus.notifications
    SET read = TRUE
    WHERE recipient_id = %s AND read = FALSE
"""

DELETE_NOTIFICATIONS = """
    DELETE FROM campus.notifications
    WHERE issuer_id = %s
      AND recipient_id = %s
      AND type = %s
      AND (%s::INTEGER IS NULL OR post_id = %s)
      AND (%s::INTEGER IS NULL OR job_id = %s)
      AND (%s::INTEGER IS NULL OR research_id = %s)
"""
