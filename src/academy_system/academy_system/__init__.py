"""Academy System package.

This package is organized by feature modules (users, attendance, excuses, ...)
with a thin Flask controller layer and service/repository layers over a
generic table client.
"""
