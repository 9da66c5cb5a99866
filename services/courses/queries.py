"""SQL queries for courses, course skills and enrollments."""

COURSE_SELECT = """
    SELECT
        c.id,
        c.instructor_id,
        c.title,
        c.code,
        c.description,
        c.difficulty,
        c.credits,
        c.estimated_hours,
        c.status,
        c.faculty_id,
        c.created_at,
        u.username AS instructor_username,
        u.name AS instructor_name,
        (
            SELECT COUNT(*) FROM campus.enrollments e
            WHERE e.course_id = c.id AND e.status = 'ENROLLED'
        ) AS enrollment_count,
        COALESCE(
            (
                SELECT ARRAY_AGG(s.name ORDER BY s.name)
                FROM campus.course_skills cs
                INNER JOIN campus.skills s ON s.skill_id = cs.skill_id
                WHERE cs.course_id = c.id
            ),
            '{}'
        ) AS skills
    FROM campus.courses c
    INNER JOIN campus.users u ON u.user_id = c.instructor_id
"""

COURSE_CURSOR_CLAUSE = """
      AND (
        %s::INTEGER IS NULL
        OR (c.created_at, c.id) <= (SELECT created_at, id FROM campus.courses WHERE id = %s)
      )
    ORDER BY c.created_at DESC, c.id DESC
    LIMIT %s
"""

LIST_PUBLISHED_COURSES = (
    COURSE_SELECT
    + """
    WHERE c.status = 'PUBLISHED'
"""
    + COURSE_CURSOR_CLAUSE
)

GET_COURSE_BY_ID = (
    COURSE_SELECT
    + """
    WHERE c.id = %s
"""
)

LIST_TAUGHT_COURSES = (
    COURSE_SELECT
    + """
    WHERE c.instructor_id = %s
    ORDER BY c.created_at DESC, c.id DESC
"""
)

LIST_ENROLLED_COURSES = """
    SELECT
        c.id,
        c.title,
        c.code,
        c.status,
        c.credits,
        e.id AS enrollment_id,
        e.status AS enrollment_status,
        e.created_at AS enrolled_at
    FROM campus.enrollments e
    INNER JOIN campus.courses c ON c.id = e.course_id
    WHERE e.student_id = %s
    ORDER BY e.created_at DESC, e.id DESC
"""

GET_COURSE_INSTRUCTOR = """
    SELECT instructor_id, title FROM campus.courses WHERE id = %s
"""

FACULTY_EXISTS = """
    SELECT 1 FROM campus.faculties WHERE faculty_id = %s
"""

INSERT_COURSE = """
    INSERT INTO campus.courses (
        instructor_id, title, code, description, difficulty,
        credits, estimated_hours, status, faculty_id
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id
"""

DELETE_COURSE_SKILLS = """
    DELETE FROM campus.course_skills WHERE course_id = %s
"""

INSERT_COURSE_SKILL = """
    INSERT INTO campus.course_skills (course_id, skill_id)
    VALUES (%s, %s)
    ON CONFLICT (course_id, skill_id) DO NOTHING
"""

INSERT_ENROLLMENT = """
    INSERT INTO campus.enrollments (course_id, student_id, status)
    VALUES (%s, %s, 'ENROLLED')
    ON CONFLICT (course_id, student_id) DO NOTHING
    RETURNING id
"""

GET_ENROLLMENT = """
    SELECT id, course_id, student_id, status, created_at
    FROM campus.enrollments
    WHERE course_id = %s AND student_id = %s
"""

GET_ENROLLMENT_BY_ID = """
    SELECT
        e.id,
        e.course_id,
        e.student_id,
        e.status,
        c.instructor_id
    FROM campus.enrollments e
    INNER JOIN campus.courses c ON c.id = e.course_id
    WHERE e.id = %s
"""

LIST_COURSE_ENROLLMENTS = """
    SELECT
        e.id,
        e.student_id,
        e.status,
        e.created_at,
        u.username,
        u.name
    FROM campus.enrollments e
    INNER JOIN campus.users u ON u.user_id = e.student_id
    WHERE e.course_id = %s
    ORDER BY e.created_at, e.id
"""

UPDATE_ENROLLMENT_STATUS = """
    UPDATE campus.enrollments
    SET status = %s
    WHERE id = %s
    RETURNING id
"""

# Course approvals. The reviewing organization is the one owning the course's faculty.
GET_COURSE_FOR_APPROVAL = """
    SELECT
        c.id,
        c.instructor_id,
        c.title,
        c.status,
        c.faculty_id,
        s.organization_id
    FROM campus.courses c
    LEFT JOIN campus.faculties f ON f.faculty_id = c.faculty_id
    LEFT JOIN campus.schools s ON s.school_id = f.school_id
    WHERE c.id = %s
    FOR UPDATE OF c
"""

IS_ORGANIZATION_OWNER = """
    SELECT 1 FROM campus.members
    WHERE organization_id = %s AND user_id = %s AND role = 'owner'
"""

GET_OPEN_APPROVAL = """
    SELECT id FROM campus.course_approvals
    WHERE course_id = %s AND status = 'UNDER_REVIEW'
"""

FIND_REVIEWER = """
    SELECT m.user_id
    FROM campus.members m
    INNER JOIN campus.users u ON u.user_id = m.user_id
    WHERE m.organization_id = %s
      AND m.role = 'owner'
      AND u.status = 'ACTIVE'
    ORDER BY m.created_at, m.member_id
    LIMIT 1
"""

UPDATE_COURSE_STATUS = """
    UPDATE campus.courses SET status = %s WHERE id = %s
"""

INSERT_APPROVAL = """
    INSERT INTO campus.course_approvals (course_id, reviewer_id, status)
    VALUES (%s, %s, 'UNDER_REVIEW')
    RETURNING id
"""

APPROVAL_SELECT = """
    SELECT
        a.id,
        a.course_id,
        a.reviewer_id,
        a.status,
        a.comments,
        a.quality_score,
        a.submitted_at,
        a.reviewed_at,
        c.title AS course_title,
        c.code AS course_code,
        c.instructor_id,
        iu.username AS instructor_username,
        iu.name AS instructor_name,
        ru.username AS reviewer_username,
        ru.name AS reviewer_name,
        s.organization_id
    FROM campus.course_approvals a
    INNER JOIN campus.courses c ON c.id = a.course_id
    INNER JOIN campus.users iu ON iu.user_id = c.instructor_id
    INNER JOIN campus.users ru ON ru.user_id = a.reviewer_id
    LEFT JOIN campus.faculties f ON f.faculty_id = c.faculty_id
    LEFT JOIN campus.schools s ON s.school_id = f.school_id
"""

GET_APPROVAL_BY_ID = (
    APPROVAL_SELECT
    + """
    WHERE a.id = %s
"""
)

# Oldest submission first; cursor row is included.
LIST_REVIEWER_APPROVALS = (
    APPROVAL_SELECT
    + """
    WHERE a.reviewer_id = %s
      AND (%s::TEXT IS NULL OR a.status = %s)
      AND (
        %s::INTEGER IS NULL
        OR (a.submitted_at, a.id) >= (
            SELECT submitted_at, id FROM campus.course_approvals WHERE id = %s
        )
      )
    ORDER BY a.submitted_at, a.id
    LIMIT %s
"""
)

RECORD_APPROVAL_DECISION = """
    UPDATE campus.course_approvals
    SET status = %s, comments = %s, quality_score = %s, reviewed_at = CURRENT_TIMESTAMP
    WHERE id = %s AND status = 'UNDER_REVIEW'
    RETURNING reviewed_at
"""
