from .base import DataSlot, PredicateConfig, SpendingPredicate
from .combinators import CombinedPredicate, IncompatiblePredicates, LogicalOperator, and_combine, or_combine
from .data_structures import ByteArray, ByteArrayVar, FieldArray, FieldArrayVar, Unit, UnitVar
from .fixed_lock_script import FixedLockScript
from .fixed_sub_lock_script import FixedSubLockScript

__all__ = [
    "ByteArray",
    "ByteArrayVar",
    "CombinedPredicate",
    "DataSlot",
    "FieldArray",
    "FieldArrayVar",
    "FixedLockScript",
    "FixedSubLockScript",
    "IncompatiblePredicates",
    "LogicalOperator",
    "PredicateConfig",
    "SpendingPredicate",
    "Unit",
    "UnitVar",
    "and_combine",
    "or_combine",
]
