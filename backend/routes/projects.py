from services import ProjectService
from utils.response import send


class ProjectController:
    """Translates request contexts into ProjectService calls and JSON responses"""

    def __init__(self, service: ProjectService):
        self.service = service

    def index(self, ctx):
        """GET /projects?category=&limit=&offset="""
        params = {
            'category': ctx.query.get('category'),
            'limit': ctx.query.get('limit'),
            'offset': ctx.query.get('offset', 0)
        }
        return send(self.service.get_all_projects(params))

    def show(self, ctx, project_id):
        """GET /projects/<id>"""
        return send(self.service.get_project(project_id))

    def featured(self, ctx):
        """GET /projects/featured?limit="""
        return send(self.service.get_featured_projects(ctx.query.get('limit', 6)))

    def store(self, ctx):
        """POST /projects"""
        return send(self.service.create_project(ctx.body, ctx.files), 201)

    def update(self, ctx, project_id):
        """PUT or POST /projects/<id>"""
        return send(self.service.update_project(project_id, ctx.body, ctx.files))

    def destroy(self, ctx, project_id):
        """DELETE /projects/<id>"""
        return send(self.service.delete_project(project_id))

    def add_images(self, ctx, project_id):
        """POST /projects/<id>/images"""
        return send(self.service.add_images(project_id, ctx.files), 201)

    def delete_image(self, ctx, image_id):
        """DELETE /projects/images/<image_id>"""
        return send(self.service.delete_image(image_id))

    def set_primary_image(self, ctx, project_id, image_id):
        """PUT /projects/<id>/images/<image_id>/primary"""
        return send(self.service.set_primary_image(project_id, image_id))
