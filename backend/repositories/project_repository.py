import logging
import os
from typing import List, Optional

from errors import CapacityError, StorageError
from models import Project, ProjectImage

logger = logging.getLogger(__name__)

PROJECT_ORDER = 'ORDER BY p.display_order ASC, p.created_at DESC, p.id DESC'


class ProjectRepository:
    """Parameterized SQL over the projects and project_images tables.

    Image rows own a file on disk; the uploader passed in resolves their URLs
    and removes the files when rows are deleted.
    """

    def __init__(self, conn, uploader, max_images: int = 5):
        self.conn = conn
        self.uploader = uploader
        self.max_images = max_images

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    @staticmethod
    def _category_clause(category):
        if category and category != 'all':
            return ' AND p.category = ?', [category]
        return '', []

    def list_projects(self, category: Optional[str] = None, limit: Optional[int] = None,
                      offset: int = 0) -> List[Project]:
        """Projects filtered by category ('all' means no filter), images attached"""
        clause, params = self._category_clause(category)
        sql = f'''SELECT p.*,
                         (SELECT COUNT(*) FROM project_images WHERE project_id = p.id) AS image_count
                  FROM projects p
                  WHERE 1=1{clause}
                  {PROJECT_ORDER}'''

        if limit:
            sql += ' LIMIT ? OFFSET ?'
            params += [int(limit), int(offset or 0)]

        rows = self.conn.fetch_all(sql, params)
        return [self._hydrate(row) for row in rows]

    def count_projects(self, category: Optional[str] = None) -> int:
        clause, params = self._category_clause(category)
        count = self.conn.fetch_scalar(
            f'SELECT COUNT(*) AS count FROM projects p WHERE 1=1{clause}', params
        )
        return int(count or 0)

    def get_project(self, project_id: int) -> Optional[Project]:
        row = self.conn.fetch_one('SELECT * FROM projects WHERE id = ?', (project_id,))
        if not row:
            return None
        return self._hydrate(row)

    def get_featured(self, limit: int = 6) -> List[Project]:
        rows = self.conn.fetch_all(
            f'''SELECT p.* FROM projects p
                WHERE p.featured = 1
                {PROJECT_ORDER}
                LIMIT ?''',
            (int(limit),)
        )
        return [self._hydrate(row) for row in rows]

    def create_project(self, project: Project) -> int:
        """Insert a project row. Text fields must already be sanitized."""
        return self.conn.insert(
            '''INSERT INTO projects
               (title, description, category, client_name, location, project_date,
                completion_status, featured, display_order)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)''',
            (
                project.title,
                project.description or '',
                project.category,
                project.client_name or '',
                project.location or '',
                project.project_date,
                project.completion_status or 'completed',
                1 if project.featured else 0,
                int(project.display_order or 0),
            )
        )

    def update_project(self, project: Project):
        """Overwrite every column of project.id with the values on project"""
        self.conn.execute(
            '''UPDATE projects SET
                   title = ?,
                   description = ?,
                   category = ?,
                   client_name = ?,
                   location = ?,
                   project_date = ?,
                   completion_status = ?,
                   featured = ?,
                   display_order = ?,
                   updated_at = CURRENT_TIMESTAMP
               WHERE id = ?''',
            (
                project.title,
                project.description or '',
                project.category,
                project.client_name or '',
                project.location or '',
                project.project_date,
                project.completion_status or 'completed',
                1 if project.featured else 0,
                int(project.display_order or 0),
                project.id,
            )
        )

    def delete_project(self, project_id: int) -> bool:
        """Remove image files, then the project row (image rows cascade)"""
        for image in self.list_images(project_id):
            self._unlink(image)

        cur = self.conn.execute('DELETE FROM projects WHERE id = ?', (project_id,))
        return cur.rowcount > 0

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def list_images(self, project_id: int) -> List[ProjectImage]:
        """Images of a project, primary first, then by display_order"""
        rows = self.conn.fetch_all(
            '''SELECT * FROM project_images
               WHERE project_id = ?
               ORDER BY is_primary DESC, display_order ASC, id ASC''',
            (project_id,)
        )
        return [self._image(row) for row in rows]

    def get_image(self, image_id: int) -> Optional[ProjectImage]:
        row = self.conn.fetch_one('SELECT * FROM project_images WHERE id = ?', (image_id,))
        return self._image(row) if row else None

    def image_count(self, project_id: int) -> int:
        count = self.conn.fetch_scalar(
            'SELECT COUNT(*) AS count FROM project_images WHERE project_id = ?', (project_id,)
        )
        return int(count or 0)

    def add_image(self, project_id: int, image_path: str, image_name: str, original_name: str,
                  is_primary: bool = False) -> int:
        """
        Attach a stored file to a project.

        The first image of a project is always primary. Making an image
        primary clears the flag on its siblings first. Raises CapacityError
        when the project already holds max_images.
        """
        count = self.image_count(project_id)
        if count >= self.max_images:
            raise CapacityError(f"Maximum {self.max_images} images allowed per project")

        if count == 0:
            is_primary = True

        if is_primary:
            self._clear_primary(project_id)

        return self.conn.insert(
            '''INSERT INTO project_images
               (project_id, image_path, image_name, original_name, is_primary, display_order)
               VALUES (?, ?, ?, ?, ?, ?)''',
            (project_id, image_path, image_name, original_name, 1 if is_primary else 0, count + 1)
        )

    def delete_image(self, image_id: int) -> bool:
        """Delete an image row and its file. False if the row does not exist."""
        image = self.get_image(image_id)
        if not image:
            return False

        self._unlink(image)
        self.conn.execute('DELETE FROM project_images WHERE id = ?', (image_id,))

        # Keep one primary while the project still has images
        if image.is_primary:
            remaining = self.list_images(image.project_id)
            if remaining:
                self.conn.execute(
                    'UPDATE project_images SET is_primary = 1 WHERE id = ?', (remaining[0].id,)
                )
        return True

    def set_primary_image(self, project_id: int, image_id: int):
        """Clear the primary flag on the project's images, then set it on image_id.

        image_id is not checked against project_id.
        """
        self._clear_primary(project_id)
        self.conn.execute('UPDATE project_images SET is_primary = 1 WHERE id = ?', (image_id,))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _clear_primary(self, project_id):
        self.conn.execute('UPDATE project_images SET is_primary = 0 WHERE project_id = ?', (project_id,))

    def _image(self, row):
        image = ProjectImage(**row)
        image.image_url = self.uploader.url_for(image.image_path)
        return image

    def _hydrate(self, row):
        project = Project(**row)
        project.images = self.list_images(project.id)
        project.image_count = len(project.images)
        return project

    def _unlink(self, image):
        """Best-effort file removal; a failure never blocks the row deletion"""
        folder = os.path.dirname(image.image_path)
        try:
            if not self.uploader.delete(image.image_name, folder):
                logger.warning('Image file already missing: %s', image.image_path)
        except StorageError as e:
            logger.warning('Could not remove image file %s: %s', image.image_path, e.message)
