from .image_uploader import ImageUploader, UploadedImage
from .project_service import ProjectService
from .category_service import CategoryService

__all__ = ['ImageUploader', 'UploadedImage', 'ProjectService', 'CategoryService']
