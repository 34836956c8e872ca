"""Reference notifier back-ends. Each runs as `python -m cdd_hooks.notifiers.<type>`."""
