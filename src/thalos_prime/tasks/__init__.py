"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus, summaries, errors)
- task_store.py: in-memory storage guarded by one lock
- intent_processor.py: pluggable processing step (rule-based default)
- coordinator.py: non-blocking submit + single-worker serialized execution
- task_api.py: small high-level helpers used by the front doors
"""
