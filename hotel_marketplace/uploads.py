import os
import uuid

from django.conf import settings
from django.core.files.storage import default_storage
from rest_framework.exceptions import ValidationError

ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp'}


def validate_image(upload):
    ext = os.path.splitext(upload.name)[1].lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unsupported file type {ext or '(none)'}; allowed: jpg, jpeg, png, webp")
    if upload.size > settings.MAX_UPLOAD_SIZE:
        raise ValidationError(f"{upload.name} exceeds the {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB limit")


def save_images(files, folder):
    """Validate and store uploaded images, returning their public URLs."""
    if not files:
        raise ValidationError("No files uploaded")
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise ValidationError(f"At most {settings.MAX_UPLOAD_FILES} files can be uploaded at once")
    for upload in files:
        validate_image(upload)

    urls = []
    for upload in files:
        ext = os.path.splitext(upload.name)[1].lower()
        name = default_storage.save(f'{folder}/{uuid.uuid4().hex}{ext}', upload)
        urls.append(default_storage.url(name))
    return urls
