"""Output layer — renders ServiceResult for terminals, pipes, and --json.

Output may import from services (for types only). It never calls services.
"""
