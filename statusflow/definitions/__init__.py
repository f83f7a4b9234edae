"""Built-in lifecycle definitions for claims, policies and invoices.

Each module keeps its lifecycle as a plain document (the single source of
truth) and builds the validated ``LifecycleDefinition`` from it at import.
"""

from statusflow.definitions.claims import CLAIM_LIFECYCLE, CLAIM_LIFECYCLE_DOCUMENT
from statusflow.definitions.invoices import INVOICE_LIFECYCLE, INVOICE_LIFECYCLE_DOCUMENT
from statusflow.definitions.policies import POLICY_LIFECYCLE, POLICY_LIFECYCLE_DOCUMENT

BUILTIN_LIFECYCLES = (CLAIM_LIFECYCLE, POLICY_LIFECYCLE, INVOICE_LIFECYCLE)

__all__ = [
    "CLAIM_LIFECYCLE",
    "CLAIM_LIFECYCLE_DOCUMENT",
    "POLICY_LIFECYCLE",
    "POLICY_LIFECYCLE_DOCUMENT",
    "INVOICE_LIFECYCLE",
    "INVOICE_LIFECYCLE_DOCUMENT",
    "BUILTIN_LIFECYCLES",
]
