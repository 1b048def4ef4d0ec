"""
Auxiliary tools: reading and writing the JSON data files, and the command line entry points
"""
