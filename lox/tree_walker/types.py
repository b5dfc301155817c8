"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.

Numbers, strings, booleans, and nil play themselves
(as float, str, bool, and None). Functions, classes,
and instances need more help, and descend from LoxValue.
"""

from abc import ABC
from typing import Sequence, Union

class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

NATIVE_DATA = Union[float, str, bool, None]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]
