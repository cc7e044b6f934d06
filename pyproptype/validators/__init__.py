"""Built-in primitive kinds and secondary validators.

`kinds` provides the label/predicate pairs used as kind gates, and `values`
provides named predicates and predicate factories for validator chains.
"""
from .kinds import KINDS, Kind, get_kind
from .values import FACTORIES, PREDICATES, build_validator
