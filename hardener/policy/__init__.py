"""
Policy execution engine.

Modules:
  models.py     — bundle, policy, script block and result records.
  loader.py     — YAML bundle loading.
  dispatcher.py — runs one script block under a deadline.
  runner.py     — audit and snapshot passes over a whole bundle.
"""
