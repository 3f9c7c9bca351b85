"""Lecture Portal package.

Faculty / HOD / registrar administration: lecture timetable, lecture
reports and daily attendance. Organized by feature modules (users,
branches, lectures, reports, ...) with a thin Flask controller layer on top
of service/repository layers that talk to a generic table store.
"""
