import os
from dotenv import load_dotenv

load_dotenv()

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def _csv(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    DATABASE_URL = os.environ.get('DATABASE_URL') or 'sqlite:///portfolio.db'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Uploaded images live under UPLOAD_FOLDER and are served back from UPLOAD_URL
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(os.path.dirname(BASE_DIR), 'uploads')
    UPLOAD_URL = os.environ.get('UPLOAD_URL') or '/uploads/'
    PROJECT_IMAGES_FOLDER = 'projects'

    MAX_IMAGES_PER_PROJECT = int(os.environ.get('MAX_IMAGES_PER_PROJECT', 5))
    MAX_IMAGE_SIZE = int(os.environ.get('MAX_IMAGE_SIZE', 5 * 1024 * 1024))  # 5MB
    ALLOWED_IMAGE_TYPES = _csv(os.environ.get(
        'ALLOWED_IMAGE_TYPES', 'image/jpeg,image/png,image/gif,image/webp'))
    ALLOWED_IMAGE_EXTENSIONS = _csv(os.environ.get(
        'ALLOWED_IMAGE_EXTENSIONS', 'jpg,jpeg,png,gif,webp'))

    # A full batch of images plus form fields must fit in one request
    MAX_CONTENT_LENGTH = (MAX_IMAGES_PER_PROJECT + 1) * MAX_IMAGE_SIZE
