import sys
from typing import Any, Optional
from boozetools.support.failureprone import illustration

from .ontology import Phrase, CantorError

class TooManyIssues(Exception):
	pass

def _headline(issues):
	plural = "" if len(issues) == 1 else "s"
	return "%d statement%s did not take effect."%(len(issues), plural)

class Report:
	"""
	Collects what went wrong (issues) and what looked doubtful (warnings)
	while a session runs its statements. While a statement is in focus,
	annotations draw that statement and underline the culprit within it.
	"""
	_issues : list["Pic"]
	_warnings : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues:Optional[int]=3):
		""" A max_issues of None means there is no limit. """
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._warnings = []
		self._max_issues = max_issues
		self._focus = None

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)
		if self._max_issues is not None and len(self._issues) >= self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self._issues.clear()
		self._warnings.clear()

	def issues(self) -> list["Pic"]: return list(self._issues)
	def warnings(self) -> list["Pic"]: return list(self._warnings)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def focus(self, statement:Optional[Phrase]):
		""" Annotations to follow concern this statement. """
		self._focus = statement

	def _annotations(self, culprit:Optional[Phrase], caption:str="") -> list["Annotation"]:
		whole = self._focus or culprit
		if whole is None: return []
		return [Annotation(whole, culprit, caption)]

	def complain_to_console(self):
		""" Emit all the warnings and issues to the console. """
		for w in self._warnings:
			print(w.as_text(), file=sys.stderr)
		_print_issues(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_headline(self._issues)+" "+message)

	# Methods the binder is likely to call:
	def warn(self, message:str, culprit:Phrase=None):
		self._warnings.append(Pic("Warning: "+message, self._annotations(culprit)))

	# Methods the session invokes:
	def undecided(self, ex:CantorError):
		intro = "Undecided: "+ex.message
		footer = ["The statement was not carried out. (Pass --undecided=warn or accept to be more trusting.)"]
		self._warnings.append(Pic(intro, self._annotations(ex.culprit), footer))

	def failed(self, ex:CantorError):
		caption = type(ex).__name__
		self.issue(Pic(ex.message, self._annotations(ex.culprit, caption)))

class Annotation:
	"""
	Draw the whole statement on one line, and underline the culprit where it
	appears in that line. A culprit nowhere to be found gets the whole line.
	"""
	def __init__(self, whole:Phrase, culprit:Optional[Phrase]=None, caption:str=""):
		self.text = whole.render()
		self.caption = caption
		found = -1 if culprit is None else self.text.find(culprit.render())
		if found < 0:
			self.col, self.width = 0, len(self.text)
		else:
			self.col, self.width = found, len(culprit.render())
	def illustrate(self):
		return illustration(self.text, self.col, max(self.width, 1), prefix='    |', caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self._intro, ""]
		for ann in self._anns:
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _print_issues(issues):
	if issues:
		print(_headline(issues), file=sys.stderr)
	for i in issues:
		print(file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
