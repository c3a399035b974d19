# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : src/coral/analyzer/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Run the checker and decode its output stream.

The main entry point is `Analyzer`:

```python
from coral.analyzer import Analyzer

with Analyzer.start("cargo", ["check", "--message-format", "json"]) as analyzer:
    for event in analyzer:
        ...
```
"""

from __future__ import annotations

from coral.analyzer.process import CheckerProcess, ProcessRunner
from coral.analyzer.stream import Analyzer

__all__ = [
    "Analyzer",
    "CheckerProcess",
    "ProcessRunner",
]
