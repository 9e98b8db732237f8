"""
The resolver's notion of one lexical scope: a frame of names in the making.
"""

from typing import Iterable, Optional
from .ontology import Token

class AlreadyExists(KeyError): pass

class Local:
	""" What the resolver knows about one name declared in one scope. """
	def __init__(self, token:Token, slot:int):
		self.token = token
		self.slot = slot
		self.is_defined = False
		self.is_used = False
	def __repr__(self):
		return "<Local %s@%d%s%s>" % (self.token.lexeme, self.slot, " defined" if self.is_defined else "", " used" if self.is_used else "")

class Layer:
	""" Lightly enhanced dictionary: It does not like duplicate keys. """
	_entries: dict[str, Local]

	def __init__(self):
		self._entries = {}

	def __contains__(self, key: str) -> bool:
		return key in self._entries

	def entry(self, key: str) -> Optional[Local]:
		return self._entries.get(key)

	def mount(self, token: Token) -> Local:
		key = token.lexeme
		if key in self._entries:
			raise AlreadyExists(key)
		self._entries[key] = local = Local(token, len(self._entries))
		return local

	def intrinsic(self, token: Token) -> Local:
		""" For 'this' and 'super': defined on arrival, and never complained about. """
		local = self.mount(token)
		local.is_defined = local.is_used = True
		return local

	def each_local(self) -> Iterable[Local]:
		return self._entries.values()
