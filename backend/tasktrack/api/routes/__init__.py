"""One router per resource: tasks, project journal, health."""
