"""ORM models package for database tables.

- CvRecord: a student's CV with its raw content and rendered HTML cache

All models inherit from the shared Base declarative class defined in data.db.
"""

from ojtech_resume.data.db import Base
from ojtech_resume.data.models.cv_record import CvRecord

__all__ = ["Base", "CvRecord"]
