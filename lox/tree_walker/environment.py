"""
The canonical list-structured search: each frame maps names to values
and links to the frame that encloses it. Frames are shared, never copied.
A closure and the block that made it may both hold the same frame,
and each sees the other's assignments.
"""
from typing import Any, Optional
from ..ontology import Token
from .evaluator import UndefinedVariable

class Absent(KeyError): pass

class Environment:
	_bindings: dict[str, Any]
	enclosing: Optional["Environment"]

	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings = {}
		self.enclosing = enclosing

	def __repr__(self):
		depth, frame = 0, self.enclosing
		while frame is not None: depth, frame = depth+1, frame.enclosing
		return "<Environment depth=%d %s>" % (depth, sorted(self._bindings))

	def define(self, name:str, value:Any):
		""" Unconditional: a redefinition simply replaces the old value. """
		self._bindings[name] = value

	def get(self, name:str) -> Any:
		frame = self
		while frame is not None:
			try: return frame._bindings[name]
			except KeyError: frame = frame.enclosing
		raise Absent(name)

	def ancestor(self, distance:int) -> "Environment":
		frame = self
		for _ in range(distance):
			frame = frame.enclosing
		return frame

	def get_at(self, name:str, distance:int) -> Any:
		try: return self.ancestor(distance)._bindings[name]
		except KeyError: raise Absent(name) from None

	def assign(self, name:Token, value:Any):
		""" Only for globals. The resolver sends locals through assign_at. """
		frame = self
		while frame is not None:
			if name.lexeme in frame._bindings:
				frame._bindings[name.lexeme] = value
				return
			frame = frame.enclosing
		raise UndefinedVariable(name)

	def assign_at(self, name:Token, value:Any, distance:int):
		self.ancestor(distance)._bindings[name.lexeme] = value
