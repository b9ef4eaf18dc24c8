import io
import logging
import os
import secrets
from datetime import datetime
from typing import List, Optional

from PIL import Image, UnidentifiedImageError
from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from errors import StorageError, ValidationError

logger = logging.getLogger(__name__)


class UploadedImage:
    """Descriptor of a file that has been validated and stored"""
    def __init__(self, stored_name, original_name, relative_path, full_path, url, size, mime_type):
        self.stored_name = stored_name
        self.original_name = original_name
        self.relative_path = relative_path
        self.full_path = full_path
        self.url = url
        self.size = size
        self.mime_type = mime_type


class ImageUploader:
    """Validates uploaded images and stores them under the upload folder"""

    DEFAULT_TYPES = ['image/jpeg', 'image/png', 'image/gif', 'image/webp']
    DEFAULT_EXTENSIONS = ['jpg', 'jpeg', 'png', 'gif', 'webp']

    def __init__(self, upload_folder: str, upload_url: str = '/uploads/',
                 max_size: int = 5 * 1024 * 1024,
                 allowed_types: Optional[List[str]] = None,
                 allowed_extensions: Optional[List[str]] = None):
        self.upload_folder = upload_folder
        self.upload_url = upload_url if upload_url.endswith('/') else upload_url + '/'
        self.max_size = max_size
        self.allowed_types = allowed_types or self.DEFAULT_TYPES
        self.allowed_extensions = allowed_extensions or self.DEFAULT_EXTENSIONS

    @classmethod
    def from_config(cls, config):
        return cls(
            upload_folder=config['UPLOAD_FOLDER'],
            upload_url=config['UPLOAD_URL'],
            max_size=config['MAX_IMAGE_SIZE'],
            allowed_types=config['ALLOWED_IMAGE_TYPES'],
            allowed_extensions=config['ALLOWED_IMAGE_EXTENSIONS'],
        )

    def url_for(self, relative_path: str) -> str:
        return self.upload_url + relative_path.lstrip('/')

    @staticmethod
    def get_extension(filename: str) -> str:
        """Lowercase extension without the dot"""
        return os.path.splitext(filename or '')[1].lstrip('.').lower()

    @staticmethod
    def generate_filename(extension: str) -> str:
        """Timestamp plus a random suffix, e.g. img_20240101_120000_9f86d081884c7d65.jpg"""
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        return f"img_{timestamp}_{secrets.token_hex(8)}.{extension}"

    @staticmethod
    def _measure(file: FileStorage) -> int:
        stream = file.stream
        stream.seek(0, os.SEEK_END)
        size = stream.tell()
        stream.seek(0)
        return size

    def validate(self, file: Optional[FileStorage]) -> str:
        """
        Run the validation pipeline and return the detected MIME type.

        Checks, first failure wins: a file actually arrived, size limit,
        sniffed MIME type, filename extension, and a full decode of the image.
        Raises ValidationError.
        """
        if file is None or not file.filename:
            raise ValidationError('No file was uploaded')

        try:
            size = self._measure(file)
        except (OSError, ValueError):
            raise ValidationError('File was only partially uploaded')

        if size == 0:
            raise ValidationError('No file was uploaded')

        if size > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(f"File size exceeds maximum allowed ({max_mb:g}MB)")

        data = file.stream.read()
        file.stream.seek(0)

        allowed = ', '.join(self.allowed_extensions)
        try:
            with Image.open(io.BytesIO(data)) as img:
                mime_type = Image.MIME.get(img.format)
        except Image.DecompressionBombError:
            raise ValidationError('File is not a valid image')
        except (UnidentifiedImageError, OSError, ValueError, SyntaxError):
            mime_type = None

        if mime_type not in self.allowed_types:
            raise ValidationError(f"Invalid file type. Allowed: {allowed}")

        if self.get_extension(file.filename) not in self.allowed_extensions:
            raise ValidationError(f"Invalid file extension. Allowed: {allowed}")

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.verify()
        except Exception:
            raise ValidationError('File is not a valid image')

        return mime_type

    def upload(self, file: FileStorage, folder: str = '') -> UploadedImage:
        """Validate and store a single image. Raises ValidationError or StorageError."""
        try:
            mime_type = self.validate(file)
        except ValidationError as e:
            logger.info('Rejected upload %r: %s', getattr(file, 'filename', None), e.message)
            raise

        size = self._measure(file)
        filename = self.generate_filename(self.get_extension(file.filename))
        upload_dir = os.path.join(self.upload_folder, folder) if folder else self.upload_folder
        full_path = os.path.join(upload_dir, filename)
        relative_path = f"{folder}/{filename}" if folder else filename

        try:
            os.makedirs(upload_dir, exist_ok=True)
            file.save(full_path)
        except OSError as e:
            logger.error('Failed to store upload %s: %s', full_path, e)
            raise StorageError('Failed to move uploaded file')

        return UploadedImage(
            stored_name=filename,
            original_name=secure_filename(file.filename) or file.filename,
            relative_path=relative_path,
            full_path=full_path,
            url=self.url_for(relative_path),
            size=size,
            mime_type=mime_type,
        )

    def delete(self, filename: str, folder: str = '') -> bool:
        """Remove a stored file. Returns False if it does not exist."""
        upload_dir = os.path.join(self.upload_folder, folder) if folder else self.upload_folder
        file_path = os.path.join(upload_dir, filename)

        if not os.path.isfile(file_path):
            return False

        try:
            os.remove(file_path)
        except OSError as e:
            raise StorageError(f'Failed to delete {filename}: {e}')
        return True
