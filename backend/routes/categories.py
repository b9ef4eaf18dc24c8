from services import CategoryService
from utils.response import send


class CategoryController:
    def __init__(self, service: CategoryService):
        self.service = service

    def index(self, ctx):
        """GET /categories"""
        return send(self.service.get_all_categories())

    def show(self, ctx, slug):
        """GET /categories/<slug>"""
        return send(self.service.get_category_by_slug(slug))

    def store(self, ctx):
        """POST /categories"""
        return send(self.service.create_category(ctx.body), 201)
