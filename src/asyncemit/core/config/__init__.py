"""
Configuration for asyncemit.

Static, environment-driven settings (with .env support) for the ambient
concerns of the package: logging output and metrics defaults.

Usage
-----
```python
from asyncemit.core.config import Config

if Config.is_production():
    ...

summary = Config.get_config_summary()
```
"""

from asyncemit.core.config.config import Config, Environment

__all__ = [
    "Config",
    "Environment",
]
