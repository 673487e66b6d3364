# API module - External service clients
# One client per service; the smart-intent resolver is the only consumer

from .client import APIClient, APIConfig, APIResponse, APIStatus
from .intent_resolver import (
    HttpIntentResolver, IntentOutcome, IntentResolver, IntentResult
)

__all__ = [
    "APIClient", "APIConfig", "APIResponse", "APIStatus",
    "HttpIntentResolver", "IntentOutcome", "IntentResolver", "IntentResult",
]
