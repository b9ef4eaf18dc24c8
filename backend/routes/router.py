"""
Manual request router.

A request is reduced to (method, path segments) and resolved to a Route
naming the controller action and its parameters. Two equivalent input
styles are accepted and yield the same Route:

  path style    PUT /projects/3/images/7/primary
  query style   PUT /projects?id=3&action=primary&image_id=7

Unknown paths raise NotFoundError, known paths with an unsupported method
raise MethodNotAllowedError.
"""

from errors import MethodNotAllowedError, NotFoundError


class RequestContext:
    """Everything a controller may read from the incoming request"""

    def __init__(self, method, path, query=None, headers=None, body=None, files=None):
        self.method = method.upper()
        self.path = path
        self.query = query or {}
        self.headers = headers or {}
        self.body = body or {}
        self.files = files or []

    @property
    def segments(self):
        path = (self.path or '').strip('/')
        return path.split('/') if path else []

    @classmethod
    def from_request(cls, request, path):
        """Build a context from a Flask request; path is relative to the API prefix"""
        if request.is_json:
            body = request.get_json(silent=True) or {}
        else:
            body = request.form.to_dict()

        files = [
            f for f in request.files.getlist('images') + request.files.getlist('images[]')
            if f and f.filename
        ]

        return cls(
            method=request.method,
            path=path,
            query=request.args.to_dict(),
            headers=dict(request.headers),
            body=body if isinstance(body, dict) else {},
            files=files,
        )


class Route:
    def __init__(self, resource, action, **params):
        self.resource = resource
        self.action = action
        self.params = params

    def __eq__(self, other):
        return (isinstance(other, Route) and
                (self.resource, self.action, self.params) == (other.resource, other.action, other.params))

    def __repr__(self):
        return f"<Route({self.resource}.{self.action}, {self.params})>"


def is_numeric(segment):
    return segment.isdigit()


def _method_not_allowed():
    return MethodNotAllowedError('Method not allowed')


def _route_not_found():
    return NotFoundError('Route not found')


def segments_from_query(segments, query):
    """Rewrite a flat query-style request into the equivalent path segments"""
    if len(segments) != 1:
        return segments

    resource = segments[0]

    if resource == 'projects':
        project_id = query.get('id')
        image_id = query.get('image_id')
        action = query.get('action')

        if action == 'featured':
            return ['projects', 'featured']
        if action == 'image' and image_id:
            return ['projects', 'images', image_id]
        if project_id and action == 'primary' and image_id:
            return ['projects', project_id, 'images', image_id, 'primary']
        if project_id and action == 'images':
            return ['projects', project_id, 'images']
        if project_id:
            return ['projects', project_id]

    elif resource == 'categories':
        slug = query.get('slug')
        if slug:
            return ['categories', slug]

    return segments


def _resolve_projects(method, segments):
    if len(segments) == 1:
        if method == 'GET':
            return Route('projects', 'index')
        if method == 'POST':
            return Route('projects', 'store')
        raise _method_not_allowed()

    if segments[1] == 'featured' and len(segments) == 2:
        if method == 'GET':
            return Route('projects', 'featured')
        raise _method_not_allowed()

    if segments[1] == 'images' and len(segments) == 3:
        if not is_numeric(segments[2]):
            raise _route_not_found()
        if method == 'DELETE':
            return Route('projects', 'delete_image', image_id=int(segments[2]))
        raise _method_not_allowed()

    if not is_numeric(segments[1]):
        raise _route_not_found()

    project_id = int(segments[1])

    if len(segments) == 2:
        if method == 'GET':
            return Route('projects', 'show', project_id=project_id)
        # POST is accepted for updates because browsers send multipart forms with it
        if method in ('PUT', 'POST'):
            return Route('projects', 'update', project_id=project_id)
        if method == 'DELETE':
            return Route('projects', 'destroy', project_id=project_id)
        raise _method_not_allowed()

    if segments[2] != 'images':
        raise _route_not_found()

    if len(segments) == 3:
        if method == 'POST':
            return Route('projects', 'add_images', project_id=project_id)
        raise _method_not_allowed()

    if len(segments) == 5 and is_numeric(segments[3]) and segments[4] == 'primary':
        if method == 'PUT':
            return Route('projects', 'set_primary_image', project_id=project_id,
                         image_id=int(segments[3]))
        raise _method_not_allowed()

    raise _route_not_found()


def _resolve_categories(method, segments):
    if len(segments) == 1:
        if method == 'GET':
            return Route('categories', 'index')
        if method == 'POST':
            return Route('categories', 'store')
        raise _method_not_allowed()

    if len(segments) == 2:
        if method == 'GET':
            return Route('categories', 'show', slug=segments[1])
        raise _method_not_allowed()

    raise _route_not_found()


def resolve(method, segments, query=None):
    """Map an HTTP method and path segments (plus optional query) to a Route"""
    method = method.upper()
    # The bare API root is the projects resource
    segments = segments_from_query(list(segments) or ['projects'], query or {})

    if segments[0] == 'projects':
        return _resolve_projects(method, segments)
    if segments[0] == 'categories':
        return _resolve_categories(method, segments)
    if segments[0] == 'health' and len(segments) == 1:
        return Route('health', 'check')

    raise _route_not_found()


def resolve_request(ctx):
    return resolve(ctx.method, ctx.segments, ctx.query)
