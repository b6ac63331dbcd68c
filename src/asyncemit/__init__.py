"""
asyncemit: in-process async publish/subscribe for asyncio programs.

Usage
-----
```python
from asyncemit import Emitter

emitter = Emitter()
off = emitter.subscribe("user.created", on_user_created)
emitter.subscribe_any(audit)

await emitter.emit_concurrent("user.created", {"id": 1})
await emitter.emit_serial("user.created", {"id": 2})

payload = await emitter.subscribe_once("shutdown")
```
"""

from asyncemit.core.event import (
    EMITTER_METHODS,
    EmissionMode,
    Emitter,
    EmitterMetrics,
    mixin,
)
from asyncemit.core.exceptions import (
    EmitterConfigurationError,
    EmitterException,
    EmitterValidationError,
)

__version__ = "1.0.0"

__all__ = [
    "Emitter",
    "EmissionMode",
    "EmitterMetrics",
    "EMITTER_METHODS",
    "mixin",
    "EmitterException",
    "EmitterValidationError",
    "EmitterConfigurationError",
    "__version__",
]
