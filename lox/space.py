"""
The resolver's notion of a lexical scope: a lightly enhanced dictionary
that remembers where each name was declared and whether its definition
has finished yet.
"""
from typing import Optional
from .ontology import Token

class AlreadyExists(KeyError): pass

class Layer:
	""" It does not like duplicate keys. """
	_locate: dict[str, Optional[Token]]
	_defined: set[str]

	def __init__(self):
		self._locate, self._defined = {}, set()

	def __contains__(self, key: str) -> bool:
		return key in self._locate

	def locate(self, key: str) -> Optional[Token]:
		return self._locate[key]

	def declare(self, name: Token):
		"""
		Enter a name as declared but not yet defined.
		A duplicate is still entered (and starts over as undefined)
		so the rest of the pass behaves as if the declaration had worked.
		"""
		key = name.lexeme
		clash = key in self._locate
		if not clash: self._locate[key] = name
		self._defined.discard(key)
		if clash: raise AlreadyExists(key)

	def define(self, key: str):
		if key in self._locate: self._defined.add(key)

	def plant(self, key: str):
		""" For the implicit names "this" and "super", which nobody declares in the text. """
		self._locate[key] = None
		self._defined.add(key)

	def is_pending(self, key: str) -> bool:
		""" Declared, but the definition is still underway. """
		return key in self._locate and key not in self._defined
