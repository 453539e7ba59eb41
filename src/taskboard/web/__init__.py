"""Server-rendered board page, its form actions and the view-state derivation."""
