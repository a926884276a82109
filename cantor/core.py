"""
The public face of the engine: What a host language runtime calls.

	* resolve_type_annotation turns annotation syntax into a set-expression.
	* contains, classify, enumerate, and differentiate are the four queries.
	* evaluate runs a symbolic expression against concrete bindings.

None of these keep any state of their own between calls.
"""
from .resolution import resolve_type_annotation
from .membership import contains, is_subset, is_disjoint, same_set
from .countability import classify, Countability
from .enumeration import enumerate_set as enumerate, Enumeration
from .calculus import differentiate
from .evaluator import evaluate
