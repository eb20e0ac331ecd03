"""School Attendance package.

Organized by feature modules (users, classes, subjects, assignments,
attendance, reports) with service and repository layers. Rendering and
routing live outside this package.
"""
