from .project_repository import ProjectRepository
from .category_repository import CategoryRepository

__all__ = ['ProjectRepository', 'CategoryRepository']
