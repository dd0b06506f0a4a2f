from contextlib import contextmanager
from dataclasses import dataclass, fields, replace
from typing import Tuple

from .errors import ValidationError


@dataclass(frozen=True)
class Settings:
    """process-wide defaults used by field access, cloning and distance filters"""
    id_field: str = 'id'
    timestamp_fields: Tuple[str, ...] = ('created_date', 'last_modified_date', 'system_modstamp')
    auto_sequence_fields: Tuple[str, ...] = ('auto_number',)
    distance_unit: str = 'mi'


_settings = Settings()


def get_settings() -> Settings:
    return _settings


def configure(**overrides) -> Settings:
    """replace individual settings, returning the new settings object"""
    global _settings
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValidationError(f"unknown setting(s): {', '.join(unknown)}")
    _settings = replace(_settings, **overrides)
    return _settings


@contextmanager
def override_settings(**overrides):
    """temporarily apply settings, restoring the previous ones on exit"""
    global _settings
    previous = _settings
    try:
        yield configure(**overrides)
    finally:
        _settings = previous
