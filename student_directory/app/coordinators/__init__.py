"""
View coordinators.

Each coordinator owns the state of one view (the student directory or
the student form), applies the transition functions from ``state`` and
talks to the backend through :class:`StudentService`.
"""
