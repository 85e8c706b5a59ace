"""
UI package - tkinter front end.
"""
