"""
Test package for school_backend.

- test_security.py: encryption, blind index and password rules
- test_auth.py: registration and the access/refresh token life cycle
- test_permissions.py: role/permission graph and the HTTP auth dependencies
- test_people.py: students, guardians, parents and encrypted identifiers
- test_academic.py: academic years and schedule conflicts
- test_records.py: attendance, grades, donations and violations
- test_dashboard.py: school totals and the teacher overview
- test_errors.py: constraint failures and required fields in patch models
"""
