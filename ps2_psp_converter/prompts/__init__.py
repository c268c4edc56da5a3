from .CONVERSION_PLAN_PROMPT import CONVERSION_PLAN_PROMPT
from .READINESS_PROMPT import READINESS_PROMPT

__all__ = ['CONVERSION_PLAN_PROMPT', 'READINESS_PROMPT']
