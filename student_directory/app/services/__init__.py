"""
Service layer.

``student_service`` wraps the REST backend and ``validation`` holds the
client-side rules a draft must satisfy before it is submitted.
"""
