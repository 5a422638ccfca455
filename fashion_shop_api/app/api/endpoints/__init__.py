"""
Endpoint modules.  Each defines an ``APIRouter`` that ``api/router.py``
mounts on the application.
"""
