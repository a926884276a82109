"""
Ask the set/type engine a question from the command line.

{0}

For example:

    cantor classify Int Bool

will tell you that pairs of an integer and a truth-value are countable, and

    cantor enumerate -n 12 Int Int

will list the first dozen of the integer pairs. Several set names make a tuple.

    cantor -h

will explain all the arguments.
"""
import sys, argparse
from ast import literal_eval
from fractions import Fraction

parser = argparse.ArgumentParser(
	prog="cantor",
	description="Queries about sets, which are also types.",
)
parser.add_argument('-v', "--verbose", action="count", help="Say more about what is going on.")
parser.add_argument("--undecided", choices=["reject", "warn", "accept"], default="reject", help="What to make of a membership nobody can decide.")
subparsers = parser.add_subparsers(dest="command", required=True)

classify_parser = subparsers.add_parser("classify", help="Is the set countable?")
classify_parser.add_argument("sets", nargs="+", help="builtin set names, such as Nat or Real")

enumerate_parser = subparsers.add_parser("enumerate", help="List the first few elements of a countable set.")
enumerate_parser.add_argument('-n', "--count", type=int, default=10, help="how many elements to list")
enumerate_parser.add_argument("sets", nargs="+", help="builtin set names, such as Nat or Real")

contains_parser = subparsers.add_parser("contains", help="Is a value a member of the set?")
contains_parser.add_argument("--value", required=True, help="a literal, such as 3, 3/4, 1+2j, or 'abc'")
contains_parser.add_argument("sets", nargs="+", help="builtin set names, such as Nat or Real")

def parse_value(text:str):
	from .values import Number, from_python
	try: return Number(Fraction(text))
	except (ValueError, ZeroDivisionError): pass
	try: return from_python(literal_eval(text))
	except (ValueError, SyntaxError, TypeError): return from_python(text)

def _resolve(names):
	from . import syntax
	from .executive import Session
	session = Session()
	return session.resolve(syntax.TupleSpec([syntax.TypeName(n) for n in names]))

def run(args):
	from .ontology import CantorError, TypeMismatchError, TypeUndecidedError
	from .diagnostics import Report, TooManyIssues
	from .binder import TypeBinder, Policy
	from . import core
	report = Report(verbose=args.verbose)
	try:
		try:
			s = _resolve(args.sets)
			report.info("The set is %s."%s.render())
			if args.command == "classify":
				print(core.classify(s).value)
			elif args.command == "enumerate":
				for x in core.enumerate(s).take(args.count):
					print(x.render())
			else:
				x = parse_value(args.value)
				print(core.contains(s, x))
				binder = TypeBinder(report, Policy(args.undecided))
				try: binder.bind(args.value, s, x)
				except TypeMismatchError: return 1
				except TypeUndecidedError as ex:
					report.undecided(ex)
					report.complain_to_console()
					return 2
				report.complain_to_console()
		except CantorError as ex:
			report.failed(ex)
		if report.sick():
			report.complain_to_console()
			return 1
	except TooManyIssues:
		report.complain_to_console()
		return 1

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
