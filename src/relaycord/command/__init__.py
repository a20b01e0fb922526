"""
Prefix commands: parsing, dispatch and the global announcement fan-out.
"""
