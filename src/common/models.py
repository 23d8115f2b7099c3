import typing as t
import uuid

from django.db import models


class TimeStampedModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True, db_index=True)

    class Meta:
        abstract = True

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Override the save method to call full_clean before saving."""
        self.full_clean()
        super().save(*args, **kwargs)


class ExifStripMixin(models.Model):
    """Mixin that strips EXIF metadata from freshly uploaded image fields on save.

    Subclasses must define IMAGE_FIELDS as an iterable of field names to process.
    """

    IMAGE_FIELDS: t.Iterable[str]

    def _strip_exif_from_image_fields(self) -> None:
        from django.core.exceptions import ValidationError
        from django.utils.translation import gettext_lazy as _
        from PIL import UnidentifiedImageError

        from common.utils import strip_exif

        for field_name in self.IMAGE_FIELDS:
            file = getattr(self, field_name, None)
            # already stored files were stripped when they were uploaded
            if not file or getattr(file, "_committed", True):
                continue
            try:
                setattr(self, field_name, strip_exif(file))
            except (UnidentifiedImageError, OSError) as e:
                raise ValidationError({field_name: [_("File is not a valid image.")]}) from e

    def save(self, *args: t.Any, **kwargs: t.Any) -> None:
        """Override save to auto-strip exif from image fields."""
        self._strip_exif_from_image_fields()
        super().save(*args, **kwargs)

    class Meta:
        abstract = True
