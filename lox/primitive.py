"""
Build the primitive namespace: the handful of native functions
that every fresh global environment starts out with.
"""
import time
from .tree_walker.values import NativeFunction

def _clock() -> float:
	return time.time()

NATIVES = [
	NativeFunction("clock", 0, _clock),
]

def install(environment):
	for native in NATIVES:
		environment.define(native.name, native)
