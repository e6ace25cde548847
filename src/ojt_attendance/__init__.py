"""OJT attendance package.

Organised by feature modules (attendance, late_permissions, timesheets, ...)
with a thin Flask controller layer over service/repository layers, plus the
client-side pieces (presence detection, geolocation, API client) used by the
clock kiosk.
"""
