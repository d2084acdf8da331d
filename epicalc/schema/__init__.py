from epicalc.schema.base import ContingencyTable, CorrectedTable, StudyDesign, StudyGoal
from epicalc.schema.validator import InvalidCellCountError, coerce_design, coerce_goal, parse_table
