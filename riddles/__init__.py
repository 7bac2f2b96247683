"""
Riddles - a riddles/trivia game backend.

Riddle and player CRUD behind JWT authentication and role-based
(guest / user / admin) authorization.
"""

__version__ = "2.0.0"
