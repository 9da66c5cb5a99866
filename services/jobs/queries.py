"""SQL queries for jobs, job likes, saved jobs and applications."""

# First two placeholders are the viewer id (is_liked / is_saved).
JOB_SELECT = """
    SELECT
        j.id,
        j.user_id,
        j.title,
        j.description,
        j.weekly_hours,
        j.location,
        j.type,
        j.experience_level,
        j.duration,
        j.salary,
        j.requirements,
        j.skills,
        j.start_date,
        j.end_date,
        j.created_at,
        u.username,
        u.name,
        (SELECT COUNT(*) FROM campus.likes l WHERE l.job_id = j.id) AS like_count,
        (SELECT COUNT(*) FROM campus.applications a WHERE a.job_id = j.id) AS application_count,
        EXISTS (
            SELECT 1 FROM campus.likes l WHERE l.job_id = j.id AND l.user_id = %s
        ) AS is_liked_by_user,
        EXISTS (
            SELECT 1 FROM campus.saved_jobs s WHERE s.job_id = j.id AND s.user_id = %s
        ) AS is_saved_by_user
    FROM campus.jobs j
    INNER JOIN campus.users u ON u.user_id = j.user_id
"""

JOB_CURSOR_CLAUSE = """
      AND (
        %s::INTEGER IS NULL
        OR (j.created_at, j.id) <= (SELECT created_at, id FROM campus.jobs WHERE id = %s)
      )
    ORDER BY j.created_at DESC, j.id DESC
    LIMIT %s
"""

# Title search is case-insensitive; type filter is skipped when the array is NULL.
LIST_JOBS = (
    JOB_SELECT
    + """
    WHERE (%s::TEXT IS NULL OR j.title ILIKE '%%' || %s || '%%')
      AND (%s::TEXT[] IS NULL OR j.type = ANY(%s::TEXT[]))
"""
    + JOB_CURSOR_CLAUSE
)

LIST_SAVED_JOBS = (
    JOB_SELECT
    + """
    WHERE EXISTS (
        SELECT 1 FROM campus.saved_jobs s2 WHERE s2.job_id = j.id AND s2.user_id = %s
    )
"""
    + JOB_CURSOR_CLAUSE
)

GET_JOB_BY_ID = (
    JOB_SELECT
    + """
    WHERE j.id = %s
"""
)

GET_JOB_COURSES = """
    SELECT c.id, c.title, c.code
    FROM campus.job_courses jc
    INNER JOIN campus.courses c ON c.id = jc.course_id
    WHERE jc.job_id = %s
    ORDER BY c.title
"""

GET_JOB_OWNER = """
    SELECT user_id, title FROM campus.jobs WHERE id = %s
"""

INSERT_JOB = """
    INSERT INTO campus.jobs (
        user_id, title, description, weekly_hours, location, type,
        experience_level, duration, salary, requirements, skills, start_date, end_date
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id
"""

INSERT_JOB_COURSE = """
    INSERT INTO campus.job_courses (job_id, course_id)
    VALUES (%s, %s)
    ON CONFLICT (job_id, course_id) DO NOTHING
"""

COUNT_EXISTING_COURSES = """
    SELECT COUNT(*) FROM campus.courses WHERE id = ANY(%s)
"""

DELETE_JOB = """
    DELETE FROM campus.jobs WHERE id = %s
"""

GET_JOB_LIKE_INFO = """
    SELECT
        (SELECT COUNT(*) FROM campus.likes WHERE job_id = %s) AS likes,
        EXISTS (
            SELECT 1 FROM campus.likes WHERE job_id = %s AND user_id = %s
        ) AS is_liked_by_user
"""

INSERT_JOB_LIKE = """
    INSERT INTO campus.likes (user_id, job_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, job_id) DO NOTHING
    RETURNING id
"""

DELETE_JOB_LIKE = """
    DELETE FROM campus.likes
    WHERE user_id = %s AND job_id = %s
    RETURNING id
"""

GET_SAVED_JOB = """
    SELECT 1 FROM campus.saved_jobs WHERE user_id = %s AND job_id = %s
"""

UPSERT_SAVED_JOB = """
    INSERT INTO campus.saved_jobs (user_id, job_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, job_id) DO NOTHING
"""

DELETE_SAVED_JOB = """
    DELETE FROM campus.saved_jobs WHERE user_id = %s AND job_id = %s
"""

GET_APPLICATION_BY_APPLICANT_AND_JOB = """
    SELECT id, applicant_id, job_id, status, created_at, updated_at
    FROM campus.applications
    WHERE applicant_id = %s AND job_id = %s
"""

GET_APPLICATION_BY_ID = """
    SELECT
        a.id,
        a.applicant_id,
        a.job_id,
        a.status,
        a.created_at,
        a.updated_at,
        j.user_id AS job_owner_id
    FROM campus.applications a
    INNER JOIN campus.jobs j ON j.id = a.job_id
    WHERE a.id = %s
"""

# The unique (applicant_id, job_id) constraint settles concurrent applies.
INSERT_APPLICATION = """
    INSERT INTO campus.applications (applicant_id, job_id, status)
    VALUES (%s, %s, 'pending')
    ON CONFLICT (applicant_id, job_id) DO NOTHING
    RETURNING id
"""

GET_APPLICATIONS_FOR_JOB = """
    SELECT
        a.id,
        a.applicant_id,
        a.job_id,
        a.status,
        a.created_at,
        a.updated_at,
        u.username,
        u.name,
        u.email
    FROM campus.applications a
    INNER JOIN campus.users u ON u.user_id = a.applicant_id
    WHERE a.job_id = %s
    ORDER BY a.created_at DESC, a.id DESC
"""

GET_APPLICATIONS_FOR_USER = """
    SELECT
        a.id,
        a.job_id,
        a.status,
        a.created_at,
        a.updated_at,
        j.title AS job_title,
        j.type AS job_type,
        j.location AS job_location
    FROM campus.applications a
    INNER JOIN campus.jobs j ON j.id = a.job_id
    WHERE a.applicant_id = %s
    ORDER BY a.created_at DESC, a.id DESC
"""

UPDATE_APPLICATION_STATUS = """
    UPDATE campus.applications
    SET status = %s, updated_at = CURRENT_TIMESTAMP
    WHERE id = %s
    RETURNING id
"""
