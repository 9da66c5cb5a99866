"""
AtCampus Services

This package contains the domain services behind the API:
- auth: registration, login, accounts and user administration
- posts: posts, comments, likes and bookmarks
- jobs: job postings, saved jobs and applications
- courses: courses, course skills and enrollments
- matching: job/student match scoring
- social: follows and follow requests
- notifications: in-app notifications
- organizations: organizations, schools, faculties and members
- skills: the shared skill catalogue
"""
