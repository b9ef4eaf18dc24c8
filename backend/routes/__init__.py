from flask import Blueprint, current_app, request, send_from_directory

from routes.categories import CategoryController
from routes.health import health_check
from routes.projects import ProjectController
from routes.router import RequestContext, resolve_request
from services import CategoryService, ImageUploader, ProjectService

API_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']

api_bp = Blueprint('api', __name__)
uploads_bp = Blueprint('uploads', __name__)


def build_controller(resource, conn, config):
    """Wire a controller for one request around an open connection"""
    if resource == 'projects':
        service = ProjectService(
            conn,
            ImageUploader.from_config(config),
            image_folder=config['PROJECT_IMAGES_FOLDER'],
            max_images=config['MAX_IMAGES_PER_PROJECT'],
        )
        return ProjectController(service)
    return CategoryController(CategoryService(conn))


@api_bp.route('/', defaults={'path': ''}, methods=API_METHODS)
@api_bp.route('/<path:path>', methods=API_METHODS)
def dispatch(path):
    """Single entry point: resolve the route, then call the controller action"""
    ctx = RequestContext.from_request(request, path)
    route = resolve_request(ctx)

    database = current_app.extensions['database']
    if route.resource == 'health':
        return health_check(database)

    with database.connect() as conn:
        controller = build_controller(route.resource, conn, current_app.config)
        return getattr(controller, route.action)(ctx, **route.params)


@uploads_bp.route('/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    """Serve stored images back at UPLOAD_URL"""
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


def init_routes(app):
    """Initialize all routes"""
    app.register_blueprint(api_bp, url_prefix='/api')

    upload_url = app.config['UPLOAD_URL']
    if upload_url.startswith('/'):
        app.register_blueprint(uploads_bp, url_prefix=upload_url.rstrip('/'))
