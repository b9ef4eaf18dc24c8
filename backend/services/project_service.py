import logging
from typing import Dict, List, Optional

from werkzeug.datastructures import FileStorage

from errors import ApiError, ValidationError
from models import Project, COMPLETION_STATUSES
from repositories import ProjectRepository
from services.image_uploader import ImageUploader, UploadedImage
from utils import response
from utils.sanitize import non_text_fields, parse_bool, parse_int, sanitize_fields

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('title', 'description', 'category', 'client_name', 'location')
STRING_FIELDS = TEXT_FIELDS + ('project_date', 'completion_status')


class ProjectService:
    """Business rules for projects and their images.

    Every public method returns a result envelope (see utils.response) rather
    than raising. Writes that create or update a project together with its
    images run in one transaction; files stored during a transaction that is
    rolled back are removed again.
    """

    def __init__(self, conn, uploader: ImageUploader, image_folder: str = 'projects',
                 max_images: int = 5):
        self.conn = conn
        self.uploader = uploader
        self.image_folder = image_folder
        self.max_images = max_images
        self.projects = ProjectRepository(conn, uploader, max_images=max_images)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_all_projects(self, params: Optional[Dict] = None) -> Dict:
        params = params or {}
        category = params.get('category') or None
        limit = parse_int(params.get('limit'))
        offset = parse_int(params.get('offset'), 0)

        projects = self.projects.list_projects(category, limit, offset)
        total = self.projects.count_projects(category)

        return response.success(
            [p.to_dict() for p in projects],
            total=total,
            count=len(projects)
        )

    def get_project(self, project_id: int) -> Dict:
        project = self.projects.get_project(project_id)
        if not project:
            return response.failure('Project not found', 404)
        return response.success(project.to_dict())

    def get_featured_projects(self, limit=6) -> Dict:
        projects = self.projects.get_featured(parse_int(limit, 6) or 6)
        return response.success([p.to_dict() for p in projects], count=len(projects))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create_project(self, data: Dict, files: Optional[List[FileStorage]] = None) -> Dict:
        files = files or []

        invalid = self._invalid_fields(data)
        if invalid:
            return invalid
        if not data.get('title'):
            return response.failure('Project title is required', 400)
        if not data.get('category'):
            return response.failure('Project category is required', 400)
        if len(files) > self.max_images:
            return response.failure(f'Maximum {self.max_images} images allowed per project', 400)

        try:
            project = self._build_project(data)
        except ValidationError as e:
            return response.from_error(e)

        moved: List[UploadedImage] = []
        try:
            with self.conn.transaction():
                project_id = self.projects.create_project(project)
                uploaded, errors = self._upload_project_images(project_id, files, moved)
        except Exception as e:
            self._discard(moved)
            return response.failure(self._message(e), 500)

        created = self.projects.get_project(project_id)
        return self._with_errors(response.success(
            created.to_dict(),
            'Project created successfully',
            uploaded_images=len(uploaded)
        ), errors)

    def update_project(self, project_id: int, data: Dict,
                       files: Optional[List[FileStorage]] = None) -> Dict:
        files = files or []

        existing = self.projects.get_project(project_id)
        if not existing:
            return response.failure('Project not found', 404)

        invalid = self._invalid_fields(data)
        if invalid:
            return invalid

        if files:
            current = self.projects.image_count(project_id)
            if current + len(files) > self.max_images:
                return response.failure(
                    f'Maximum {self.max_images} images allowed. Current: {current}', 400
                )

        try:
            project = self._build_project(data, existing)
        except ValidationError as e:
            return response.from_error(e)
        project.id = project_id

        moved: List[UploadedImage] = []
        try:
            with self.conn.transaction():
                self.projects.update_project(project)
                uploaded, errors = self._upload_project_images(project_id, files, moved)
        except Exception as e:
            self._discard(moved)
            return response.failure(self._message(e), 500)

        updated = self.projects.get_project(project_id)
        return self._with_errors(response.success(
            updated.to_dict(),
            'Project updated successfully',
            uploaded_images=len(uploaded)
        ), errors)

    def delete_project(self, project_id: int) -> Dict:
        if not self.projects.get_project(project_id):
            return response.failure('Project not found', 404)

        try:
            deleted = self.projects.delete_project(project_id)
        except Exception as e:
            return response.failure(self._message(e), 500)

        if not deleted:
            return response.failure('Failed to delete project', 500)
        return response.success(message='Project deleted successfully')

    def add_images(self, project_id: int, files: Optional[List[FileStorage]]) -> Dict:
        """Attach images to an existing project. Files that fail validation are skipped."""
        files = files or []

        if not self.projects.get_project(project_id):
            return response.failure('Project not found', 404)
        if not files:
            return response.failure('No images provided', 400)

        current = self.projects.image_count(project_id)
        if current + len(files) > self.max_images:
            return response.failure(
                f'Maximum {self.max_images} images allowed. '
                f'Current: {current}, Attempting to add: {len(files)}',
                400
            )

        moved: List[UploadedImage] = []
        try:
            uploaded, errors = self._upload_project_images(project_id, files, moved)
        except Exception as e:
            return response.failure(self._message(e), 500)

        if not uploaded and errors:
            return response.failure(errors[0]['message'], 400, errors=errors)

        return self._with_errors(
            response.success(uploaded, f'{len(uploaded)} image(s) uploaded successfully'),
            errors
        )

    def delete_image(self, image_id: int) -> Dict:
        try:
            deleted = self.projects.delete_image(image_id)
        except Exception as e:
            return response.failure(self._message(e), 500)

        if deleted:
            return response.success(message='Image deleted successfully')
        return response.failure('Failed to delete image or image not found', 404)

    def set_primary_image(self, project_id: int, image_id: int) -> Dict:
        try:
            self.projects.set_primary_image(project_id, image_id)
        except Exception as e:
            logger.error('Failed to set primary image %s on project %s: %s', image_id, project_id, e)
            return response.failure('Failed to set primary image', 500)
        return response.success(message='Primary image set successfully')

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_project(self, data: Dict, existing: Optional[Project] = None) -> Project:
        """Merge request fields over existing values and sanitize text fields"""
        def pick(name, default):
            value = data.get(name)
            return default if value is None else value

        base = existing or Project(title='', category='')
        fields = sanitize_fields({
            'title': pick('title', base.title),
            'description': pick('description', base.description),
            'category': pick('category', base.category),
            'client_name': pick('client_name', base.client_name),
            'location': pick('location', base.location),
        }, TEXT_FIELDS)

        status = pick('completion_status', base.completion_status) or 'completed'
        if status not in COMPLETION_STATUSES:
            raise ValidationError(
                f"Invalid completion_status. Allowed: {', '.join(COMPLETION_STATUSES)}"
            )

        return Project(
            project_date=pick('project_date', base.project_date) or None,
            completion_status=status,
            featured=parse_bool(data.get('featured'), base.featured),
            display_order=parse_int(data.get('display_order'), base.display_order),
            **fields
        )

    def _upload_project_images(self, project_id, files, moved):
        """Store each file and record it. Returns (uploaded, errors)."""
        uploaded, errors = [], []

        for file in files:
            try:
                stored = self.uploader.upload(file, self.image_folder)
            except ValidationError as e:
                errors.append({'file': getattr(file, 'filename', None), 'message': e.message})
                continue
            moved.append(stored)

            is_primary = not uploaded and self.projects.image_count(project_id) == 0
            try:
                image_id = self.projects.add_image(
                    project_id,
                    stored.relative_path,
                    stored.stored_name,
                    stored.original_name,
                    is_primary
                )
            except Exception:
                self._discard([stored])
                raise
            uploaded.append({'id': image_id, 'filename': stored.stored_name, 'url': stored.url})

        return uploaded, errors

    def _discard(self, moved):
        """Remove files stored by a rolled back transaction"""
        for stored in moved:
            try:
                self.uploader.delete(stored.stored_name, self.image_folder)
            except ApiError as e:
                logger.warning('Could not remove %s after rollback: %s', stored.stored_name, e.message)

    @staticmethod
    def _invalid_fields(data):
        names = non_text_fields(data, STRING_FIELDS)
        if names:
            return response.failure(f"Fields must be text: {', '.join(names)}", 400)
        return None

    @staticmethod
    def _with_errors(result, errors):
        if errors:
            result['errors'] = errors
        return result

    @staticmethod
    def _message(error):
        return error.message if isinstance(error, ApiError) else str(error)
