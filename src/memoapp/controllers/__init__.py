"""Controllers that mutate AppState in response to user actions."""
