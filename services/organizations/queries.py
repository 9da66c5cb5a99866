"""SQL queries for organizations, schools, faculties and members."""

SLUG_EXISTS = """
    SELECT 1 FROM campus.organizations WHERE slug = %s
"""

INSERT_ORGANIZATION = """
    INSERT INTO campus.organizations (name, slug)
    VALUES (%s, %s)
    RETURNING organization_id
"""

INSERT_MEMBER = """
    INSERT INTO campus.members (organization_id, user_id, role)
    VALUES (%s, %s, %s)
    ON CONFLICT (organization_id, user_id) DO NOTHING
    RETURNING member_id
"""

GET_ORGANIZATION_FOR_USER = """
    SELECT
        o.organization_id,
        o.name,
        o.slug,
        o.created_at,
        m.role AS member_role
    FROM campus.organizations o
    INNER JOIN campus.members m ON m.organization_id = o.organization_id
    WHERE m.user_id = %s
    ORDER BY (m.role = 'owner') DESC, o.created_at
    LIMIT 1
"""

GET_MEMBER_ROLE = """
    SELECT role FROM campus.members
    WHERE organization_id = %s AND user_id = %s
"""

LIST_SCHOOLS = """
    SELECT
        s.school_id,
        s.organization_id,
        s.name,
        s.description,
        s.created_at,
        (SELECT COUNT(*) FROM campus.faculties f WHERE f.school_id = s.school_id) AS faculty_count
    FROM campus.schools s
    WHERE s.organization_id = %s
    ORDER BY s.name
"""

GET_SCHOOL = """
    SELECT school_id, organization_id, name, description, created_at
    FROM campus.schools
    WHERE school_id = %s
"""

INSERT_SCHOOL = """
    INSERT INTO campus.schools (organization_id, name, description)
    VALUES (%s, %s, %s)
    ON CONFLICT (organization_id, name) DO NOTHING
    RETURNING school_id
"""

LIST_FACULTIES = """
    SELECT
        f.faculty_id,
        f.school_id,
        f.name,
        f.description,
        f.created_at,
        (SELECT COUNT(*) FROM campus.members m WHERE m.faculty_id = f.faculty_id) AS member_count
    FROM campus.faculties f
    WHERE f.school_id = %s
    ORDER BY f.name
"""

GET_FACULTY = """
    SELECT f.faculty_id, f.school_id, f.name, s.organization_id
    FROM campus.faculties f
    INNER JOIN campus.schools s ON s.school_id = f.school_id
    WHERE f.faculty_id = %s
"""

INSERT_FACULTY = """
    INSERT INTO campus.faculties (school_id, name, description)
    VALUES (%s, %s, %s)
    ON CONFLICT (school_id, name) DO NOTHING
    RETURNING faculty_id
"""

ASSIGN_MEMBER_FACULTY = """
    UPDATE campus.members
    SET faculty_id = %s
    WHERE member_id = %s AND organization_id = %s
    RETURNING member_id
"""

LIST_MEMBERS = """
    SELECT
        m.member_id,
        m.user_id,
        m.role,
        m.faculty_id,
        u.username,
        u.name,
        u.role AS user_role
    FROM campus.members m
    INNER JOIN campus.users u ON u.user_id = m.user_id
    WHERE m.organization_id = %s
    ORDER BY m.created_at
"""
