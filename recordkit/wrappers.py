from .types import *
from .errors import ValidationError
from .fields import get_field


class Wrapper(Generic[T]):
    """
    adapter over a single record. subclasses add derived behaviour;
    the source record is only ever read, never modified.
    """

    def __init__(self, record: T):
        self.record = record

    def get(self, path: str, default: Any = None) -> Any:
        return get_field(self.record, path, default)

    def __eq__(self, other: Any) -> bool:
        return type(other) is type(self) and other.record is self.record

    def __hash__(self) -> int:
        return id(self.record)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.record!r})"


def as_wrapper_factory(factory: Any) -> Callable[[T], Any]:
    if not callable(factory):
        raise ValidationError(f"wrapper factory must be callable, got {factory!r}")
    return factory
