"""
README support: backend lookup, HTTP client and the terminal fetch component.
"""
