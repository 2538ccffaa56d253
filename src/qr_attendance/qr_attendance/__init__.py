"""QR Attendance package.

Organized by feature modules (identity, students, qr, attendance, ui) with a
thin Flask controller layer over service/repository layers.
"""
