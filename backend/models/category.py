from models.project import isoformat


class Category:
    def __init__(self, name, slug, description='', display_order=0, is_active=True, id=None,
                 created_at=None):
        self.id = id
        self.name = name
        self.slug = slug
        self.description = description
        self.display_order = display_order or 0
        self.is_active = bool(is_active)
        self.created_at = created_at

    def to_dict(self):
        """Convert to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'description': self.description,
            'display_order': self.display_order,
            'is_active': self.is_active,
            'created_at': isoformat(self.created_at)
        }

    def __repr__(self):
        return f"<Category(id={self.id}, slug='{self.slug}')>"
