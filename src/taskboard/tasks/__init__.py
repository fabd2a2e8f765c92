"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskFilter)
- task_form.py: add/edit form state and field conversion
- task_query.py: filter criteria + client-side priority ordering
- task_list.py: TaskListController (fetch, add, toggle, edit, delete, clear)
"""
