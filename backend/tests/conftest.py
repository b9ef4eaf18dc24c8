import io
import os
import sys

import pytest
from PIL import Image
from werkzeug.datastructures import FileStorage

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


def make_image_bytes(fmt='PNG', size=(8, 8), color=(200, 30, 30), mode='RGB'):
    """Encode a solid-colour image in memory"""
    buf = io.BytesIO()
    Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture
def app(tmp_path):
    """Application bound to a throwaway SQLite file and upload folder"""
    from app import create_app
    app = create_app({
        'TESTING': True,
        'DATABASE_URL': f"sqlite:///{tmp_path / 'portfolio_test.db'}",
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'UPLOAD_URL': '/uploads/',
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client"""
    with app.test_client() as client:
        yield client


@pytest.fixture
def database(app):
    return app.extensions['database']


@pytest.fixture
def conn(database):
    with database.connect() as conn:
        yield conn


@pytest.fixture
def uploader(app):
    from services import ImageUploader
    return ImageUploader.from_config(app.config)


@pytest.fixture
def images_dir(app):
    return os.path.join(app.config['UPLOAD_FOLDER'], app.config['PROJECT_IMAGES_FOLDER'])


@pytest.fixture
def image_file():
    """Factory for werkzeug FileStorage objects holding real images"""
    def _make(filename='photo.png', fmt='PNG', data=None, content_type='image/png'):
        if data is None:
            data = make_image_bytes(fmt)
        return FileStorage(stream=io.BytesIO(data), filename=filename, content_type=content_type)
    return _make


@pytest.fixture
def png_upload():
    """Factory for (stream, filename) tuples accepted by the Flask test client"""
    def _make(filename='photo.png', fmt='PNG'):
        return (io.BytesIO(make_image_bytes(fmt)), filename)
    return _make


@pytest.fixture
def image_bytes():
    return make_image_bytes


@pytest.fixture(scope='session')
def huge_dimension_png():
    """A small 1-bit PNG whose pixel count trips Pillow's decompression bomb guard"""
    return make_image_bytes('PNG', size=(15000, 15000), color=0, mode='1')
