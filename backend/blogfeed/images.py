# Storage of uploaded post images
from collections import namedtuple
import os
import uuid

from flask import current_app
from PIL import Image

# Pillow format name -> stored file extension
_EXTENSIONS = {'PNG': 'png', 'JPEG': 'jpg'}

ClearResult = namedtuple('ClearResult', ['path', 'removed', 'error'])


def _sniff_format(file):
    """Return the Pillow format of an upload, or None if it is not an image we keep."""
    try:
        with Image.open(file.stream) as img:
            fmt = img.format
            img.verify()
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as e:
        current_app.logger.debug(f'Upload is not a readable image: {e}')
        return None
    finally:
        file.stream.seek(0)
    return fmt if fmt in _EXTENSIONS else None


def accept_image(file):
    """Store an uploaded image and return its reference (``images/<name>``).

    Returns None when nothing usable was attached: no file, an empty filename,
    a content type outside ALLOWED_IMAGE_TYPES or bytes that are not PNG/JPEG.
    """
    if file is None or not file.filename:
        return None
    if file.mimetype not in current_app.config['ALLOWED_IMAGE_TYPES']:
        current_app.logger.debug(f'Rejected upload with content type {file.mimetype}')
        return None

    fmt = _sniff_format(file)
    if fmt is None:
        return None

    filename = f'{uuid.uuid4()}.{_EXTENSIONS[fmt]}'
    file.save(image_path(filename))
    current_app.logger.debug(f'Stored uploaded image as {filename}')
    return f"{current_app.config['IMAGE_URL_PREFIX']}/{filename}"


def image_path(filename):
    # Only the last path component is honoured so references cannot leave the folder
    return os.path.join(current_app.config['UPLOAD_FOLDER'], os.path.basename(filename))


def same_image(first, second):
    """True when two references resolve to the same stored file."""
    first_name = os.path.basename(first or '')
    return bool(first_name) and first_name == os.path.basename(second or '')


def clear_image(image_url):
    """Best effort removal of a stored image. Never raises; inspect the result."""
    name = os.path.basename(image_url or '')
    if not name:
        return ClearResult(None, False, 'empty image reference')
    path = image_path(name)
    try:
        os.remove(path)
    except OSError as e:
        return ClearResult(path, False, str(e))
    return ClearResult(path, True, None)


def clear_image_logged(image_url):
    result = clear_image(image_url)
    if result.removed:
        current_app.logger.debug(f'Removed image {result.path}')
    else:
        current_app.logger.warning(f'Could not remove image {image_url!r}: {result.error}')
    return result
