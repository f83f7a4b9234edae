"""StatusFlow: declarative status lifecycles for business records.

StatusFlow drives the status of claims, policies and invoices from one
generic engine and a data definition per object type:
- Which transitions to offer from each status
- Which fields must be present before a transition may be confirmed
- Which fields stay editable in each status
- Origin freezing while a confirmation is open
- Reconciliation when the server settles on a different status

Basic usage:
    >>> from statusflow.runtime import LifecycleRuntime
    >>> from statusflow.types import Record
    >>> runtime = LifecycleRuntime()
    >>> invoice = Record(id="inv_1", status="PENDING", fields={"billingPeriod": "2024-03"})
    >>> runtime.can_confirm("invoice", "PENDING", "VALIDATED", invoice)
    False
"""

__version__ = "0.1.0"
__author__ = "StatusFlow Team"

# Version info
VERSION = (0, 1, 0)

# Core exports
from statusflow.definition import LifecycleDefinition, load_definition
from statusflow.engine import LifecycleEngine
from statusflow.logging_config import configure_logging
from statusflow.registry import LifecycleRegistry, default_registry
from statusflow.runtime import LifecycleRuntime
from statusflow.types import Record

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "LifecycleDefinition",
    "LifecycleEngine",
    "LifecycleRegistry",
    "LifecycleRuntime",
    "Record",
    "configure_logging",
    "default_registry",
    "load_definition",
]
