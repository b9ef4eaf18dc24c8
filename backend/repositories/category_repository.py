from typing import List, Optional

from models import Category


class CategoryRepository:
    """Parameterized SQL over project_categories. Inactive rows are hidden from listings."""

    def __init__(self, conn):
        self.conn = conn

    def list_active(self) -> List[Category]:
        rows = self.conn.fetch_all(
            'SELECT * FROM project_categories WHERE is_active = 1 ORDER BY display_order ASC, id ASC'
        )
        return [Category(**row) for row in rows]

    def get_by_slug(self, slug: str) -> Optional[Category]:
        row = self.conn.fetch_one(
            'SELECT * FROM project_categories WHERE slug = ? AND is_active = 1', (slug,)
        )
        return Category(**row) if row else None

    def get_by_id(self, category_id: int) -> Optional[Category]:
        row = self.conn.fetch_one('SELECT * FROM project_categories WHERE id = ?', (category_id,))
        return Category(**row) if row else None

    def create(self, category: Category) -> int:
        return self.conn.insert(
            '''INSERT INTO project_categories (name, slug, description, display_order, is_active)
               VALUES (?, ?, ?, ?, ?)''',
            (
                category.name,
                category.slug,
                category.description or '',
                int(category.display_order or 0),
                1 if category.is_active else 0,
            )
        )

    def update(self, category: Category) -> bool:
        cur = self.conn.execute(
            '''UPDATE project_categories SET
                   name = ?,
                   slug = ?,
                   description = ?,
                   display_order = ?,
                   is_active = ?
               WHERE id = ?''',
            (
                category.name,
                category.slug,
                category.description or '',
                int(category.display_order or 0),
                1 if category.is_active else 0,
                category.id,
            )
        )
        return cur.rowcount > 0

    def delete(self, category_id: int) -> bool:
        cur = self.conn.execute('DELETE FROM project_categories WHERE id = ?', (category_id,))
        return cur.rowcount > 0
