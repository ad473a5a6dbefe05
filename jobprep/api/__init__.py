"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from jobprep.api import app

    uvicorn jobprep.api:app --reload
"""

from jobprep.api.app import app, create_app

__all__ = ["app", "create_app"]
