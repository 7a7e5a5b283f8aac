# flake8: noqa: F401
from .fields import Field, BooleanField, NumberField, TextField, KIND_BOOLEAN, KIND_INTEGER, KIND_DECIMAL, KIND_TEXT
from .hydrator import Hydrator
