import copy
from typing import Any, Optional

from .config import get_settings
from .errors import ValidationError
from .fields import clear_fields
from .types import CloneSpec


def clone_record(prototype: Any, spec: Optional[CloneSpec] = None) -> Any:
    """
    produce an independent copy of a prototype record.
    identity, generated timestamps and auto-sequence fields are cleared unless the spec preserves them;
    the prototype itself is never touched.
    """
    if prototype is None:
        raise ValidationError("cannot clone a missing prototype")
    spec = spec or CloneSpec()
    settings = get_settings()

    clone = copy.deepcopy(prototype) if spec.deep_copy else copy.copy(prototype)

    cleared = []
    if not spec.preserve_identity:
        cleared.append(settings.id_field)
    if not spec.preserve_generated_timestamps:
        cleared.extend(settings.timestamp_fields)
    if not spec.preserve_auto_sequence:
        cleared.extend(settings.auto_sequence_fields)
    return clear_fields(clone, cleared)
