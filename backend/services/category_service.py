from typing import Dict

from errors import ApiError
from models import Category
from repositories import CategoryRepository
from utils import response
from utils.sanitize import generate_slug, non_text_fields, parse_bool, parse_int, sanitize_fields


class CategoryService:
    """Business rules for project categories"""

    def __init__(self, conn):
        self.categories = CategoryRepository(conn)

    def get_all_categories(self) -> Dict:
        categories = self.categories.list_active()
        return response.success([c.to_dict() for c in categories], count=len(categories))

    def get_category_by_slug(self, slug: str) -> Dict:
        category = self.categories.get_by_slug(slug)
        if not category:
            return response.failure('Category not found', 404)
        return response.success(category.to_dict())

    def create_category(self, data: Dict) -> Dict:
        if not data.get('name'):
            return response.failure('Category name is required', 400)

        invalid = non_text_fields(data, ('name', 'slug', 'description'))
        if invalid:
            return response.failure(f"Fields must be text: {', '.join(invalid)}", 400)

        fields = sanitize_fields({
            'name': data['name'],
            'slug': data.get('slug'),
            'description': data.get('description') or '',
        }, ('name', 'slug', 'description'))
        fields['slug'] = generate_slug(fields['slug'] or fields['name'])

        if not fields['slug']:
            return response.failure('Category slug could not be derived from name', 400)

        category = Category(
            display_order=parse_int(data.get('display_order'), 0),
            is_active=parse_bool(data.get('is_active'), True),
            **fields
        )

        try:
            category_id = self.categories.create(category)
        except ApiError as e:
            return response.from_error(e)

        return response.success(
            self.categories.get_by_id(category_id).to_dict(),
            'Category created successfully'
        )
