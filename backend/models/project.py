"""Project and ProjectImage records as read from and written to the database."""

COMPLETION_STATUSES = ('completed', 'in_progress', 'upcoming')


def isoformat(value):
    """Dates come back as strings from SQLite and as date objects from PostgreSQL"""
    if value is None or isinstance(value, str):
        return value
    return value.isoformat(sep=' ') if hasattr(value, 'hour') else value.isoformat()


class ProjectImage:
    def __init__(self, id=None, project_id=None, image_path='', image_name='', original_name=None,
                 is_primary=False, display_order=0, created_at=None, image_url=None):
        self.id = id
        self.project_id = project_id
        self.image_path = image_path
        self.image_name = image_name
        self.original_name = original_name
        self.is_primary = bool(is_primary)
        self.display_order = display_order or 0
        self.created_at = created_at
        self.image_url = image_url

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'project_id': self.project_id,
            'image_path': self.image_path,
            'image_name': self.image_name,
            'original_name': self.original_name,
            'is_primary': self.is_primary,
            'display_order': self.display_order,
            'created_at': isoformat(self.created_at),
            'image_url': self.image_url
        }


class Project:
    def __init__(self, title, category, description='', client_name='', location='', project_date=None,
                 completion_status='completed', featured=False, display_order=0, id=None,
                 created_at=None, updated_at=None, image_count=None, images=None):
        self.id = id
        self.title = title
        self.description = description
        self.category = category
        self.client_name = client_name
        self.location = location
        self.project_date = project_date
        self.completion_status = completion_status or 'completed'
        self.featured = bool(featured)
        self.display_order = display_order or 0
        self.created_at = created_at
        self.updated_at = updated_at
        self.images = images if images is not None else []
        self.image_count = image_count if image_count is not None else len(self.images)

    def to_dict(self):
        """Convert to dictionary, images included"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'client_name': self.client_name,
            'location': self.location,
            'project_date': isoformat(self.project_date),
            'completion_status': self.completion_status,
            'featured': self.featured,
            'display_order': self.display_order,
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at),
            'image_count': self.image_count,
            'images': [image.to_dict() for image in self.images]
        }

    def __repr__(self):
        return f"<Project(id={self.id}, title='{self.title}', category='{self.category}')>"
