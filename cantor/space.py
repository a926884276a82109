"""
Cantor's notion of name-spaces with support for nested scopes.
The root layer holds the builtin names; sessions stack their own layers atop.
"""

from abc import ABC, abstractmethod
from typing import Generic, Iterable, Optional, TypeVar

T = TypeVar('T')

class AlreadyExists(KeyError): pass

class Space(ABC, Generic[T]):
	@abstractmethod
	def __contains__(self, key: str) -> bool: pass

	@abstractmethod
	def symbol(self, key: str) -> Optional[T]: pass

	@abstractmethod
	def define(self, key:str, symbol:T) -> T: pass

	def child(self) -> "Chain[T]":
		return Chain(Layer(), self)


class Layer(Space[T]):
	""" Lightly enhanced dictionary: It does not like duplicate keys. """
	_symbol: dict[str, T]

	def __init__(self):
		self._symbol = {}

	def __contains__(self, key: str) -> bool:
		return key in self._symbol

	def symbol(self, key: str) -> Optional[T]:
		return self._symbol.get(key)

	def define(self, key:str, symbol:T) -> T:
		if key in self._symbol:
			raise AlreadyExists(key)
		else:
			self._symbol[key] = symbol
			return symbol

	def forget(self, key:str):
		del self._symbol[key]

	def each_symbol(self) -> Iterable[T]:
		return self._symbol.values()


class Chain(Space[T]):
	def __init__(self, top:Space[T], rest:Space[T]):
		self.top = top
		self._rest = rest

	def __contains__(self, key: str) -> bool:
		return key in self.top or key in self._rest

	def symbol(self, key: str) -> Optional[T]:
		found = self.top.symbol(key)
		return self._rest.symbol(key) if found is None else found

	def define(self, key:str, symbol:T) -> T:
		# No shadowing: Builtin names stay put.
		if key in self._rest: raise AlreadyExists(key)
		return self.top.define(key, symbol)

	def forget(self, key:str):
		self.top.forget(key)
