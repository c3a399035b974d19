# topmark:header:start
#
#   project      : Coral
#   file         : __init__.py
#   file_relpath : tests/analyzer/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

