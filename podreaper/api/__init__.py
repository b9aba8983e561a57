"""HTTP surface: the /healthz liveness endpoint."""
