"""SQL queries for skills and user skills."""

# Reuses an existing skill regardless of letter case.
GET_SKILL_BY_NAME = """
    SELECT skill_id, name
    FROM campus.skills
    WHERE LOWER(name) = LOWER(%s)
"""

INSERT_SKILL = """
    INSERT INTO campus.skills (name)
    VALUES (%s)
    ON CONFLICT DO NOTHING
    RETURNING skill_id
"""

SEARCH_SKILLS = """
    SELECT skill_id, name
    FROM campus.skills
    WHERE (%s::TEXT IS NULL OR name ILIKE '%%' || %s || '%%')
    ORDER BY name
    LIMIT %s
"""

GET_USER_SKILLS = """
    SELECT s.skill_id, s.name, us.created_at
    FROM campus.user_skills us
    INNER JOIN campus.skills s ON s.skill_id = us.skill_id
    WHERE us.user_id = %s
    ORDER BY s.name
"""

INSERT_USER_SKILL = """
    INSERT INTO campus.user_skills (user_id, skill_id)
    VALUES (%s, %s)
    ON CONFLICT (user_id, skill_id) DO NOTHING
"""

DELETE_USER_SKILL = """
    DELETE FROM campus.user_skills
    WHERE user_id = %s AND skill_id = %s
"""
