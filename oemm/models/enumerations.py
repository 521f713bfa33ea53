from enum import Enum

class CheckType(str, Enum):
    BOOLEAN = "boolean"      # yes/no practice check
    SCALE5 = "scale5"        # 0-5 anchored rating
    SCALE100 = "scale100"    # 0-100 coverage percentage

class Combinator(str, Enum):
    AND = "AND"
    OR = "OR"

class ComparisonOperator(str, Enum):
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

class AssessmentMode(str, Enum):
    CORE = "core"   # popular subset (core24)
    FULL = "full"   # every parameter in the model

class RuleScope(str, Enum):
    VISIBLE = "visible"  # gates/caps only see parameters scored in this mode
    GLOBAL = "global"    # gates/caps see every model parameter
