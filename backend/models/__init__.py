"""Plain data records for the portfolio tables."""

from models.project import Project, ProjectImage, COMPLETION_STATUSES
from models.category import Category

__all__ = [
    'Project',
    'ProjectImage',
    'Category',
    'COMPLETION_STATUSES'
]
