"""
Pydantic schema definitions for student payloads.

``Student`` describes records returned by the backend and
``StudentInput`` the body sent when creating or updating a record.
"""
