"""
autoplanner: greedy day and week planning engine.
"""

import logging

# Library loggers stay silent until an application configures them
logging.getLogger(__name__).addHandler(logging.NullHandler())
