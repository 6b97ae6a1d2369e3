"""
Use Cases

Organized into domain folders:
- sharing/: Creator-facing invitation management
- access/: Reviewer-facing token, code and device flows

Import from subdirectories for better organization.
"""
