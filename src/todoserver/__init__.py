"""todoserver — per-user todo list API with JWT bearer authentication.

Users register and log in with email/password, receive a signed bearer
token, and manage a task list that only they can see or change.
"""

__version__ = "0.1.0"
