"""SQL queries for job/student matching."""

# Course ids and titles of the job come back as parallel arrays.
JOB_REQUIREMENTS_SELECT = """
    SELECT
        j.id,
        j.title,
        j.skills,
        COALESCE(ARRAY_AGG(c.id ORDER BY c.title) FILTER (WHERE c.id IS NOT NULL), '{}') AS course_ids,
        COALESCE(ARRAY_AGG(c.title ORDER BY c.title) FILTER (WHERE c.id IS NOT NULL), '{}') AS course_titles
    FROM campus.jobs j
    LEFT JOIN campus.job_courses jc ON jc.job_id = j.id
    LEFT JOIN campus.courses c ON c.id = jc.course_id
"""

GET_JOB_REQUIREMENTS = (
    JOB_REQUIREMENTS_SELECT
    + """
    WHERE j.id = %s
    GROUP BY j.id
"""
)

LIST_JOB_REQUIREMENTS = (
    JOB_REQUIREMENTS_SELECT
    + """
    GROUP BY j.id
    ORDER BY j.created_at DESC, j.id DESC
    LIMIT %s
"""
)

GET_STUDENT_SKILL_NAMES = """
    SELECT s.name
    FROM campus.user_skills us
    INNER JOIN campus.skills s ON s.skill_id = us.skill_id
    WHERE us.user_id = %s
"""

GET_ENROLLED_COURSE_IDS = """
    SELECT course_id
    FROM campus.enrollments
    WHERE student_id = %s AND status = 'ENROLLED'
"""
