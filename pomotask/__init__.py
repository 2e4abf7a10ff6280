# pomotask/__init__.py
"""
pomotask - a personal task list with pomodoro time tracking.
"""

__version__ = "0.3.0"
