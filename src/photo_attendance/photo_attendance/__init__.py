"""Photo Attendance package.

Organized by feature modules (employees, attendance, photos, verification)
with a thin Flask JSON controller layer over service/repository layers.
"""
