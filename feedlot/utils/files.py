# feedlot/utils/files.py
import os
import uuid

import magic
from flask import current_app
from werkzeug.utils import secure_filename

from feedlot.exceptions import ValidationError

# Death photos only: detected MIME type -> accepted extensions
ALLOWED_IMAGE_MIME_TYPES = {
    'image/jpeg': ['.jpg', '.jpeg'],
    'image/png': ['.png'],
    'image/gif': ['.gif'],
    'image/webp': ['.webp'],
    'image/heic': ['.heic'],
}

PHOTO_SUBFOLDER = 'deaths'


def validate_image_file(file_storage):
    """
    Validates an uploaded photo using magic bytes AND extension matching.
    Raises ValidationError if invalid, otherwise returns the extension.
    """
    filename = secure_filename(file_storage.filename or '')
    ext = os.path.splitext(filename)[1].lower()

    if not ext:
        raise ValidationError("Photo has no file extension.", fields=['photo'])

    header = file_storage.read(2048)
    file_storage.seek(0)
    detected_mime = magic.from_buffer(header, mime=True)

    if detected_mime not in ALLOWED_IMAGE_MIME_TYPES:
        raise ValidationError(f"Photo type '{detected_mime}' is not allowed.", fields=['photo'])
    if ext not in ALLOWED_IMAGE_MIME_TYPES[detected_mime]:
        raise ValidationError(
            f"Photo extension '{ext}' does not match detected type '{detected_mime}'.",
            fields=['photo'],
        )
    return ext


def is_local_upload(reference):
    """True for references produced by save_death_photo, False for external URLs."""
    return bool(reference) and reference.startswith(f"{PHOTO_SUBFOLDER}/")


def save_death_photo(file_storage, animal_id):
    """
    Stores a death photo under UPLOAD_FOLDER and returns its relative reference.
    """
    ext = validate_image_file(file_storage)
    folder = os.path.join(current_app.config['UPLOAD_FOLDER'], PHOTO_SUBFOLDER)
    os.makedirs(folder, exist_ok=True)

    name = f"{secure_filename(str(animal_id))}-{uuid.uuid4().hex[:12]}{ext}"
    file_storage.save(os.path.join(folder, name))
    current_app.logger.info(f"Saved death photo {name} for animal {animal_id}")
    return f"{PHOTO_SUBFOLDER}/{name}"


def remove_upload(reference):
    """Deletes a previously saved upload; missing files are ignored."""
    path = os.path.join(current_app.config['UPLOAD_FOLDER'], reference)
    try:
        os.remove(path)
    except FileNotFoundError:
        current_app.logger.warning(f"Upload {reference} already removed")


class StagedUploads:
    """Files touched by one submission, settled when its transaction ends.

    ``saved`` are new files the records will point at; ``superseded`` are
    files the records stop pointing at.
    """

    def __init__(self):
        self.saved = []
        self.superseded = []

    def discard(self):
        """The write failed: drop the new files and keep the old ones."""
        for reference in self.saved:
            remove_upload(reference)
        self.saved = []
        self.superseded = []

    def finalize(self):
        """The write is committed: drop the files nothing points at any more."""
        for reference in self.superseded:
            remove_upload(reference)
        self.saved = []
        self.superseded = []
