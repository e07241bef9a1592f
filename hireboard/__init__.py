# HireBoard - Applicant Pipeline Board
"""
HireBoard - Applicant tracking pipeline board.

Kanban-style pipeline controller for moving applicants through hiring
stages, plus the applicant store service it talks to.
"""

__version__ = "0.1.0"
__author__ = "HireBoard"
__description__ = "Applicant pipeline board and applicant store"
