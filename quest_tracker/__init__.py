"""Quest Tracker: gamified habit and task progression engine"""

__version__ = "0.1.0"
