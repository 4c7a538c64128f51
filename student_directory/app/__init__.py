"""
Application package for the Student Directory client.

``core`` holds configuration, logging and the error types, ``schemas``
the pydantic models exchanged with the backend, ``services`` the REST
facade and the form validation rules, and ``coordinators`` the state
containers behind the directory and form views.
"""
