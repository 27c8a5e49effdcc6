from .models import (
    DetailLevel,
    Face,
    Model,
    Point,
    Selection,
    TagRecord,
    Vertex,
)
from .reader import decode_model, read_model

__all__ = [
    "DetailLevel",
    "Face",
    "Model",
    "Point",
    "Selection",
    "TagRecord",
    "Vertex",
    "decode_model",
    "read_model",
]
