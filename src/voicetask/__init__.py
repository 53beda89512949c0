"""Voice task capture parser.

Turns one transcribed utterance into a structured task or event with
suggested reminders.
"""

__version__ = "0.1.0"
